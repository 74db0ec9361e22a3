from os import isatty, path
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import traceback
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from .util import CalculatorError
from .calculator import Calculator
from .lexer import Lexer


class InteractiveInput:
    def __init__(self, prompt, history=None):
        self.prompt = prompt
        self.history = history

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    vi_mode=True,
                                    enable_suspend=True,
                                    enable_open_in_editor=True,
                                    history=self.history,
                                    prompt_continuation=' ' * len(self.prompt),
                                    # Debatable. Interferes with X11 selection.
                                    mouse_support=True,
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the financial calculator.
    '''

    DEFAULT_PROMPT = '> '
    HISTORY_FILE = '~/.fincalc_history'

    def dumper(self):
        '''
        Dump all lexemes matches, and the keys they press.
        '''
        lexer = Lexer()
        print('[groups]\t<repr(lexeme)>\t<keys>')
        for line in self.args.expressions:
            for match in lexer.lex(line):
                matched = match.group(0)
                groups = lexer.matchedgroups(match)
                print(*groups.keys(),
                      repr(matched),
                      ' '.join(lexer.keys(match)),
                      sep='\t')

    def executor(self):
        '''
        Run calculator, printing the display after each line.
        '''
        calculator = Calculator(precision=self.args.precision)
        lexer = Lexer()
        for line in self.args.expressions:
            try:
                for match in lexer.lex(line):
                    if lexer.isfeedable(match):
                        calculator.feed(lexer.keys(match))
            # Abort entire rest of line, makes sense anyway
            except CalculatorError as e:
                self._report(e)
                continue
            if calculator.error is not None:
                self._report(calculator.error)
            if self.args.stack:
                self.printstate(calculator)
            print(calculator.display())

    def _report(self, error):
        print(error.args[0], file=sys.stderr)
        if self.args.verbose:
            traceback.print_exception(type(error), error,
                                      error.__traceback__,
                                      file=sys.stderr)

    def printstate(self, calculator):
        '''
        Print the stack, top of the stack first, then the TVM registers.
        '''
        for number in reversed(calculator.stack):
            print(calculator.format(number))
        print(*('{}={}'.format(name, calculator.format(value))
                for name, value
                in calculator.registers._asdict().items()),
              sep='\t')

    def raw_grammar(self):
        '''
        Print current internally defined grammar.
        '''
        lexer = Lexer()
        print(lexer.LEXEME)

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            history = FileHistory(path.expanduser(self.HISTORY_FILE))
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT,
                                    history=history)
        else:
            return sys.stdin

    def __init__(self):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.argument_parser = ArgumentParser(
            description='Financial RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true',
                                          help='show tracebacks of errors')
        self.argument_parser.add_argument('-k', '--precision',
                                          type=int,
                                          default=Calculator.DEFAULT_PRECISION,
                                          help='decimal places displayed')
        self.argument_parser.add_argument('-s', '--stack',
                                          action='store_true',
                                          help='print stack and registers')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-D', '--dump', self.dumper)]:
            main_groups.add_argument(short_, long_,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.
        '''
        self.args = self.argument_parser.parse_args(args)
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        try:
            self.args.action()
        except CalculatorError as e:
            self._report(e)
            sys.exit(1)
        except KeyboardInterrupt:
            sys.exit(1)


def main():
    CLI().run()
