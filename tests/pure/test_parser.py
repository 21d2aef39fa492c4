import unittest

from minilang.lang.error import ErrorHandler, ParseSkip
from minilang.pure.lexical import tokenize
from minilang.pure.parser import Parser, TokenCursor, parse_block, parse_program
from minilang.pure.syntax import (BinaryExpr, CallExpr, ExpressionStatement, FunctionDeclaration, Identifier,
                                  LetStatement, NumberLiteral, Operator, Program, ReturnStatement)


def parse(source):
    """Returns (program, diagnostics) for source."""
    error_handler = ErrorHandler(fatal=False)
    program = parse_program(tokenize(source), error_handler)
    return program, error_handler.diagnostics


class TokenCursorTestCase(unittest.TestCase):

    def test_peek_and_advance(self):
        tokens = tokenize("a b")
        cursor = TokenCursor(tokens)

        self.assertEqual(tokens[0], cursor.peek())
        self.assertEqual(tokens[2], cursor.peek(2))
        self.assertIsNone(cursor.peek(3))
        self.assertIsNone(cursor.peek(-1))

        cursor.advance()
        self.assertEqual(tokens[1], cursor.peek())
        self.assertEqual(tokens[0], cursor.peek(-1))
        self.assertFalse(cursor.exhausted)

        cursor.advance()
        cursor.advance()
        self.assertTrue(cursor.exhausted)
        self.assertIsNone(cursor.peek())

    def test_skip_until(self):
        tokens = tokenize("a b;c")
        cursor = TokenCursor(tokens)

        self.assertEqual(tokens[:3], cursor.skip_until(lambda token: token.text == ";"))
        self.assertEqual(";", cursor.peek().text)

        cursor.advance()
        self.assertEqual(tokens[4:], cursor.skip_until(lambda token: token.text == "never"))
        self.assertTrue(cursor.exhausted)


class ParserTestCase(unittest.TestCase):

    def test_minimal_function(self):
        program, diagnostics = parse("function test() {\n  return 1;\n}")

        expected = Program([FunctionDeclaration("test", [ReturnStatement(BinaryExpr([NumberLiteral("1")]))])])
        self.assertEqual(expected, program)
        self.assertEqual([], diagnostics)

    def test_program(self):
        source = "function test() {\n    let a = 1;\n    let b = 2;\n    return a + b;\n}\n\ntest();\n"
        program, diagnostics = parse(source)

        body = [
            LetStatement("a", BinaryExpr([NumberLiteral("1")])),
            LetStatement("b", BinaryExpr([NumberLiteral("2")])),
            ReturnStatement(BinaryExpr([Identifier("a"), Identifier("b"), Operator("+")])),
        ]
        expected = Program([FunctionDeclaration("test", body), ExpressionStatement(CallExpr("test"))])
        self.assertEqual(expected, program)
        self.assertEqual([], diagnostics)

    def test_program_is_a_sequence(self):
        program, __ = parse("a;\nb;")
        self.assertEqual(2, len(program))
        self.assertEqual(ExpressionStatement(BinaryExpr([Identifier("b")])), program[1])
        self.assertEqual(list(program), program.body)

    def test_flattened_notation(self):
        cases = {
            "return 1;": [NumberLiteral("1")],
            "return a + 2;": [Identifier("a"), NumberLiteral("2"), Operator("+")],
            "return a + b + 1;": [Identifier("a"), Identifier("b"), Operator("+"), NumberLiteral("1"), Operator("+")],
            "return 1.5+x": [NumberLiteral("1.5"), Identifier("x"), Operator("+")],
            "return;": [],
        }
        for case, notation in cases.items():
            program, __ = parse(case)
            self.assertEqual(Program([ReturnStatement(BinaryExpr(notation))]), program, case)

    def test_operand_positions(self):
        program, __ = parse("return ab + 7;")
        first, second, operator = program[0].expression.notation
        self.assertEqual((7, 12, 10), (first.position, second.position, operator.position))

    def test_line_break_terminates(self):
        program, __ = parse("let a = 1\nlet b = a + 2\nb")
        expected = Program([
            LetStatement("a", BinaryExpr([NumberLiteral("1")])),
            LetStatement("b", BinaryExpr([Identifier("a"), NumberLiteral("2"), Operator("+")])),
            ExpressionStatement(BinaryExpr([Identifier("b")])),
        ])
        self.assertEqual(expected, program)

    def test_calls(self):
        cases = {
            "f();": CallExpr("f"),
            "f(1 2);": CallExpr("f"),    # arguments are discarded
            "f (x);": CallExpr("f"),
            "a + b();": CallExpr("a"),   # call applies to the first operand
        }
        for case, expected in cases.items():
            program, __ = parse(case)
            self.assertEqual(Program([ExpressionStatement(expected)]), program, case)

        program, __ = parse("return f();")
        self.assertEqual(Program([ReturnStatement(CallExpr("f"))]), program)

    def test_function_name(self):
        cases = {
            "function f() {}": "f",
            "function   spaced   () {}": "spaced",
            "function my name() {}": "my name",
        }
        for case, name in cases.items():
            program, __ = parse(case)
            self.assertEqual(Program([FunctionDeclaration(name)]), program, case)

    def test_nested_functions(self):
        source = "function outer() {\n  function inner() { return 2; }\n  return inner();\n}\nouter();"
        program, diagnostics = parse(source)

        inner = FunctionDeclaration("inner", [ReturnStatement(BinaryExpr([NumberLiteral("2")]))])
        outer = FunctionDeclaration("outer", [inner, ReturnStatement(CallExpr("inner"))])
        self.assertEqual(Program([outer, ExpressionStatement(CallExpr("outer"))]), program)
        self.assertEqual([], diagnostics)

    def test_parse_block_stops_at_closing_brace(self):
        tokens = tokenize("return 1; } return 2;")
        parser = Parser(tokens)

        self.assertEqual([ReturnStatement(BinaryExpr([NumberLiteral("1")]))], parser.parse_block())
        self.assertEqual(" ", parser.cursor.peek().text)
        self.assertEqual([ReturnStatement(BinaryExpr([NumberLiteral("2")]))], parse_block(tokens[parser.cursor.current:]))

    def test_opening_brace_is_skipped(self):
        program, __ = parse("{ a; }")
        self.assertEqual(Program([ExpressionStatement(BinaryExpr([Identifier("a")]))]), program)

    def test_stray_closing_brace(self):
        program, diagnostics = parse("a;\n}\nb;")

        self.assertEqual(Program([ExpressionStatement(BinaryExpr([Identifier("a")]))]), program)
        self.assertEqual(1, len(diagnostics))
        self.assertIsInstance(diagnostics[0], ParseSkip)
        self.assertEqual(3, diagnostics[0].position)

    def test_missing_operator(self):
        program, diagnostics = parse("return a b;")

        self.assertEqual(Program([ReturnStatement(BinaryExpr([Identifier("a")]))]), program)
        self.assertEqual(["b"], [error.expr for error in diagnostics])

    def test_stray_parens(self):
        program, diagnostics = parse("return (1);")

        self.assertEqual(Program([ReturnStatement(BinaryExpr([NumberLiteral("1")]))]), program)
        self.assertEqual(["(", ")"], [error.expr for error in diagnostics])

    def test_skipped_statements(self):
        cases = ["1;", "+ 2;", "= ;", "()"]
        for case in cases:
            program, diagnostics = parse(case)
            self.assertEqual(Program(), program, case)
            self.assertTrue(diagnostics, case)
            self.assertTrue(all(isinstance(error, ParseSkip) for error in diagnostics), case)

    def test_malformed_let(self):
        program, diagnostics = parse("let a 1 = 2;")
        self.assertEqual(Program([LetStatement("a", BinaryExpr([NumberLiteral("2")]))]), program)
        self.assertEqual(["1"], [error.expr for error in diagnostics])

        program, diagnostics = parse("let a")
        self.assertEqual(Program([LetStatement("a", BinaryExpr())]), program)
        self.assertEqual(1, len(diagnostics))

        program, __ = parse("let")
        self.assertEqual(Program([LetStatement(None, BinaryExpr())]), program)

    def test_function_without_body(self):
        program, diagnostics = parse("function f()")
        self.assertEqual(Program([FunctionDeclaration("f")]), program)
        self.assertEqual(1, len(diagnostics))

    def test_whitespace_is_not_diagnosed(self):
        __, diagnostics = parse("\n\n   let a = 1;\r\n\t\n")
        self.assertEqual([], diagnostics)


if __name__ == '__main__':
    unittest.main()
