import io
import sys

import pytest

import mark
import scrape


def _text(tmp_path, name, body):
    path = tmp_path / name
    path.write_text(body, encoding='utf-8')
    return str(path)


def test_read_then_generate(tmp_path, capsys):
    src = _text(tmp_path, 'in.txt', 'a b c\n')
    model = str(tmp_path / 'model.txt')
    assert mark.main(['read', '1', model, src]) == 0
    assert open(model, encoding='utf-8').readline() == '1\n'

    assert mark.main(['generate', model, '10']) == 0
    assert capsys.readouterr().out == 'a b c\n'


def test_generate_respects_word_limit(tmp_path, capsys):
    src = _text(tmp_path, 'in.txt', 'the cat saw the dog and the dog saw the cat\n' * 3)
    model = str(tmp_path / 'model.txt')
    assert mark.main(['build', '1', model, src]) == 0
    assert mark.main(['generate', model, '5', '--seed', '7']) == 0
    out = capsys.readouterr().out.split()
    assert 0 < len(out) <= 5
    assert set(out) <= {'the', 'cat', 'saw', 'dog', 'and'}


def test_seed_is_reproducible(tmp_path, capsys):
    src = _text(tmp_path, 'in.txt', 'x y x z x y y z x x z y\n')
    model = str(tmp_path / 'model.txt')
    mark.main(['read', '1', model, src])
    capsys.readouterr()
    mark.main(['generate', model, '20', '--seed', '3'])
    first = capsys.readouterr().out
    mark.main(['generate', model, '20', '--seed', '3'])
    assert capsys.readouterr().out == first


def test_several_inputs_and_stdin(tmp_path, monkeypatch):
    one = _text(tmp_path, 'one.txt', 'p q\n')
    monkeypatch.setattr(sys, 'stdin', io.StringIO('r q\n'))
    model = tmp_path / 'model.txt'
    assert mark.main(['read', '1', str(model), one, '-']) == 0
    lines = model.read_text(encoding='utf-8').splitlines()
    assert sorted(lines[1:]) == sorted(['"" p 1 r 1', 'p q 1', 'r q 1'])


def test_url_input(tmp_path, monkeypatch):
    seen = []

    def url_words(url):
        seen.append(url)
        return iter(['w1', 'w2'])
    monkeypatch.setattr(scrape, 'url_words', url_words)
    model = tmp_path / 'model.txt'
    assert mark.main(['read', '1', str(model), 'https://example.com/page']) == 0
    assert seen == ['https://example.com/page']
    assert 'w1 w2 1' in model.read_text(encoding='utf-8').splitlines()


def test_missing_input_writes_nothing(tmp_path, capsys):
    model = tmp_path / 'model.txt'
    assert mark.main(['read', '2', str(model), str(tmp_path / 'nope.txt')]) == mark.EXIT_IO
    assert not model.exists()
    assert 'could not open' in capsys.readouterr().err


def test_missing_model(tmp_path, capsys):
    assert mark.main(['generate', str(tmp_path / 'nope.txt'), '3']) == mark.EXIT_IO
    assert 'could not open' in capsys.readouterr().err


def test_invalid_model(tmp_path, capsys):
    model = _text(tmp_path, 'model.txt', '2\n"" "" I\n')
    assert mark.main(['generate', model, '3']) == mark.EXIT_FORMAT
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'invalid model file' in captured.err


def test_unknown_command():
    with pytest.raises(SystemExit) as exc:
        mark.main(['frobnicate'])
    assert exc.value.code == 2


def test_prefix_length_must_be_positive(tmp_path):
    with pytest.raises(SystemExit) as exc:
        mark.main(['read', '0', str(tmp_path / 'm.txt'), 'in.txt'])
    assert exc.value.code == 2


def test_entropy_on_stderr(tmp_path, capsys):
    model = _text(tmp_path, 'model.txt', '1\n"" a 1 b 1\n')
    assert mark.main(['generate', model, '1', '--entropy']) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() in ('a', 'b')
    assert 'entropy: 0.693 nats' in captured.err


def test_info(tmp_path, capsys):
    model = _text(tmp_path, 'model.txt', '1\n"" a 2\na b 1 c 1\n')
    assert mark.main(['info', model]) == 0
    out = capsys.readouterr().out
    assert 'prefix length: 1' in out
    assert 'prefixes:      2' in out
    assert 'transitions:   4' in out


def test_read_builds_through_chain_build(tmp_path, monkeypatch):
    import chain
    seen = []
    real = chain.build

    def spy(sources, prefix_len):
        seen.append(prefix_len)
        return real(sources, prefix_len)
    monkeypatch.setattr(chain, 'build', spy)
    one = _text(tmp_path, 'one.txt', 'a b\n')
    two = _text(tmp_path, 'two.txt', 'b c\n')
    model = tmp_path / 'model.txt'
    assert mark.main(['read', '1', str(model), one, two]) == 0
    assert seen == [1]
    lines = model.read_text(encoding='utf-8').splitlines()
    assert 'b c 1' in lines
    assert 'b b 1' not in lines


class ClosedPipe:
    def write(self, s):
        raise BrokenPipeError(32, 'Broken pipe')

    def flush(self):
        pass


def test_closed_stdout_is_not_a_file_error(tmp_path, capsys, monkeypatch):
    model = _text(tmp_path, 'model.txt', '1\n"" a 1\n')
    monkeypatch.setattr(sys, 'stdout', ClosedPipe())
    assert mark.main(['generate', model, '1']) == mark.EXIT_IO
    assert 'could not open' not in capsys.readouterr().err
