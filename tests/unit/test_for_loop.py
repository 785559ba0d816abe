"""
Tests for for-loop header minimization.
"""

from jsdeob.shared.nodes import Node
from tests.test_utils import (
    Assign, Binary, Block, Call, Declarator, ExprStmt, For, Identifier, If, Literal, Program,
    Sequence, VarDecl,
)


def _less_than_ten(name: str) -> Node:
    return Binary('<', Identifier(name), Literal(10))


class TestVarHoisting:
    def test_referenced_declaration_stays(self, rewriter):
        # for (var i; i<10;) ;
        tree = Program(For(VarDecl(Declarator('i')), _less_than_ten('i')))
        assert rewriter.transform(tree) == tree

    def test_unreferenced_declaration_is_hoisted(self, rewriter):
        # for (var j; i<10;) ;
        tree = Program(For(VarDecl(Declarator('j')), _less_than_ten('i')))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('j')),
            For(None, _less_than_ten('i')),
        )

    def test_declarations_are_partitioned(self, rewriter):
        # for (var i,j,k; i<10;) ;
        tree = Program(For(
            VarDecl(Declarator('i'), Declarator('j'), Declarator('k')), _less_than_ten('i'),
        ))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('j'), Declarator('k')),
            For(VarDecl(Declarator('i')), _less_than_ten('i')),
        )

    def test_update_counts_as_reference(self, rewriter):
        update = Node('UpdateExpression', operator='++', argument=Identifier('j'), prefix=False)
        tree = Program(For(
            VarDecl(Declarator('i', Literal(0)), Declarator('j', Literal(0))),
            None,
            update,
        ))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('i', Literal(0))),
            For(VarDecl(Declarator('j', Literal(0))), None, update),
        )

    def test_initializers_move_with_declarators(self, rewriter):
        tree = Program(For(
            VarDecl(Declarator('n', Call('count')), Declarator('i', Literal(0))),
            Binary('<', Identifier('i'), Literal(10)),
        ))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('n', Call('count'))),
            For(VarDecl(Declarator('i', Literal(0))), _less_than_ten('i')),
        )

    def test_body_references_do_not_count(self, rewriter):
        tree = Program(For(
            VarDecl(Declarator('k')), _less_than_ten('i'), None, ExprStmt(Call('f', Identifier('k'))),
        ))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('k')),
            For(None, _less_than_ten('i'), None, ExprStmt(Call('f', Identifier('k')))),
        )

    def test_let_declarations_are_untouched(self, rewriter):
        tree = Program(For(VarDecl(Declarator('j'), kind='let'), _less_than_ten('i')))
        assert rewriter.transform(tree) == tree

    def test_destructured_names_are_referenced(self, rewriter):
        pattern = Node('ArrayPattern', elements=[Identifier('a'), Identifier('b')])
        declaration = VarDecl(Node('VariableDeclarator', id=pattern, init=Identifier('pair')))
        tree = Program(For(declaration, Identifier('b')))
        assert rewriter.transform(tree) == tree

    def test_hoisting_in_single_slot_makes_block(self, rewriter):
        loop = For(VarDecl(Declarator('j')), _less_than_ten('i'))
        tree = Program(Node('WhileStatement', test=Identifier('x'), body=loop))
        assert rewriter.transform(tree).body[0].body == Block(
            VarDecl(Declarator('j')), For(None, _less_than_ten('i')),
        )


class TestSequenceInit:
    def test_leading_expressions_are_hoisted(self, rewriter):
        # for (a(), i = 0; i < 10;) ;
        tree = Program(For(Sequence(Call('a'), Assign('i', 0)), _less_than_ten('i')))
        assert rewriter.transform(tree) == Program(
            ExprStmt(Call('a')),
            For(Assign('i', 0), _less_than_ten('i')),
        )

    def test_plain_init_is_untouched(self, rewriter):
        tree = Program(For(Assign('i', 0), _less_than_ten('i')))
        assert rewriter.transform(tree) == tree


class TestEvaluationOrder:
    def test_declarator_after_initialized_kept_one_stays(self, rewriter):
        # for (var i = f(), a = g(i); i < 10;) ;
        tree = Program(For(
            VarDecl(Declarator('i', Call('f')), Declarator('a', Call('g', Identifier('i')))),
            _less_than_ten('i'),
        ))
        assert rewriter.transform(tree) == tree

    def test_declarator_after_uninitialized_kept_one_moves(self, rewriter):
        # for (var i, a = g(); i < 10;) ;
        tree = Program(For(VarDecl(Declarator('i'), Declarator('a', Call('g'))), _less_than_ten('i')))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('a', Call('g'))),
            For(VarDecl(Declarator('i')), _less_than_ten('i')),
        )


class TestLabels:
    def _labeled(self, name: str, body: Node) -> Node:
        return Node('LabeledStatement', label=Identifier(name), body=body)

    def _continue(self, name: str) -> Node:
        return Node('ContinueStatement', label=Identifier(name))

    def test_hoisted_declaration_moves_before_label(self, rewriter):
        # outer: for (var j; i < 10;) { continue outer; }
        body = Block(self._continue('outer'))
        tree = Program(self._labeled('outer', For(VarDecl(Declarator('j')), _less_than_ten('i'), None, body)))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('j')),
            self._labeled('outer', For(None, _less_than_ten('i'), None, body)),
        )

    def test_hoisted_init_moves_before_label(self, rewriter):
        # outer: for (a(), i = 0; i < 10;) ;
        tree = Program(self._labeled('outer', For(Sequence(Call('a'), Assign('i', 0)), _less_than_ten('i'))))
        assert rewriter.transform(tree) == Program(
            ExprStmt(Call('a')),
            self._labeled('outer', For(Assign('i', 0), _less_than_ten('i'))),
        )

    def test_nested_labels(self, rewriter):
        loop = For(VarDecl(Declarator('j')), _less_than_ten('i'))
        tree = Program(self._labeled('a', self._labeled('b', loop)))
        assert rewriter.transform(tree) == Program(
            VarDecl(Declarator('j')),
            self._labeled('a', self._labeled('b', For(None, _less_than_ten('i')))),
        )

    def test_labeled_block_with_break_is_kept(self, rewriter):
        # block: { if (x) break block; for (;;) ; }
        escape = If(Identifier('x'), Node('BreakStatement', label=Identifier('block')))
        tree = Program(self._labeled('block', Block(escape, For(None, None))))
        assert rewriter.transform(tree) == tree

    def test_labeled_block_without_loop_is_kept(self, rewriter):
        tree = Program(self._labeled('block', Block(ExprStmt(Call('a')), ExprStmt(Call('b')))))
        assert rewriter.transform(tree) == tree
