'''
Command line tests
'''

from fincalc.cli import CLI

from pytest import raises


def run(capsys, *args):
    CLI().run(args=list(args))
    return capsys.readouterr()


def test_expression(capsys):
    out, err = run(capsys, '-e', '5 enter 3 +')
    assert out == '8\n'
    assert err == ''


def test_display_after_each_line(capsys):
    out, _ = run(capsys, '-e', '2 enter', '3 /')
    assert out.splitlines() == ['2', '0.67']


def test_precision(capsys):
    out, _ = run(capsys, '-k', '4', '-e', '2 enter 3 /')
    assert out == '0.6667\n'


def test_tvm(capsys):
    out, _ = run(capsys, '-e', '12 n 1 i 1000 chs pv 0 pmt fv')
    assert out == '1126.83\n'


def test_months(capsys):
    out, _ = run(capsys, '-e', 'mts 01.01.2020 enter 01.06.2020 enter')
    assert out == '5\n'


def test_error(capsys):
    out, err = run(capsys, '-e', '4 enter 0 /')
    assert out == 'Error\n'
    assert 'Cannot divide' in err


def test_error_traceback(capsys):
    _, err = run(capsys, '-v', '-e', '4 enter 0 /')
    assert 'Traceback' in err


def test_bad_lexeme_skips_line(capsys):
    out, err = run(capsys, '-e', '5 enter ?', '7')
    assert out == '7\n'
    assert "Couldn't lex ?" in err


def test_stack(capsys):
    out, _ = run(capsys, '-s', '-e', '1 enter 2 enter 5 pv')
    assert out.splitlines() == [
        '2',
        '1',
        'N=0\tIYR=0\tPV=5\tPMT=0\tFV=0',
        '2',
    ]


def test_dump(capsys):
    out, _ = run(capsys, '-D', '-e', '1.5 swap')
    lines = out.splitlines()
    assert lines[1] == "number\t'1.5'\t1 . 5"
    assert lines[2] == "space\t' '\t"
    assert lines[3] == "key\t'swap'\tswap"


def test_raw_grammar(capsys):
    out, _ = run(capsys, '-G')
    assert '(?<date>' in out


def test_bad_lexeme_in_dump_exits(capsys):
    with raises(SystemExit):
        run(capsys, '-D', '-e', '%')


def test_dump_bad_lexeme_exits(capsys):
    with raises(SystemExit) as exited:
        run(capsys, '-D', '-e', '5 ?')
    assert exited.value.code == 1
    assert "Couldn't lex ?" in capsys.readouterr().err
