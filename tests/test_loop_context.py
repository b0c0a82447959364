"""Tests for the ``loop`` variable inside @foreach/@for bodies."""

from __future__ import annotations

from wafview import LoopContext


class TestLoopContextObject:
    """LoopContext in isolation."""

    def test_properties_while_iterating(self) -> None:
        loop = LoopContext(["a", "b", "c"])
        seen = []
        for item in loop:
            seen.append(
                (item, loop.index, loop.index0, loop.first, loop.last, loop.revindex, loop.revindex0)
            )
        assert seen == [
            ("a", 1, 0, True, False, 3, 2),
            ("b", 2, 1, False, False, 2, 1),
            ("c", 3, 2, False, True, 1, 0),
        ]

    def test_neighbours(self) -> None:
        loop = LoopContext([1, 2, 3])
        pairs = [(loop.previtem, loop.nextitem) for _ in loop]
        assert pairs == [(None, 2), (1, 3), (2, None)]

    def test_aliases(self) -> None:
        loop = LoopContext(range(4))
        for _ in loop:
            assert loop.iteration == loop.index
            assert loop.count == loop.length == 4
            assert loop.remaining == loop.revindex0
            assert loop.even is (loop.index % 2 == 0)
            assert loop.odd is not loop.even

    def test_cycle(self) -> None:
        loop = LoopContext("abcd")
        assert [loop.cycle("odd", "even") for _ in loop] == ["odd", "even", "odd", "even"]
        assert loop.cycle() is None

    def test_depth_and_parent(self) -> None:
        outer = LoopContext([1])
        inner = LoopContext([2], parent=outer)
        assert outer.depth == 1
        assert inner.depth == 2
        assert inner.parent is outer

    def test_materializes_iterators(self) -> None:
        loop = LoopContext(iter([1, 2]))
        assert loop.length == 2
        assert list(loop) == [1, 2]

    def test_repr(self) -> None:
        loop = LoopContext([1, 2])
        next(iter(loop))
        assert repr(loop) == "<LoopContext 1/2>"


class TestLoopInTemplates:
    """``loop`` as seen from template code."""

    def test_index_and_length(self, env) -> None:
        template = env.from_string(
            "@foreach(items as item){{ loop.index }}/{{ loop.length }} @endforeach"
        )
        assert template.render(items="xyz") == "1/3 2/3 3/3 "

    def test_first_and_last(self, env) -> None:
        template = env.from_string(
            "@foreach(items as item)"
            "@if(loop.first)[@endif{{ item }}{!! ']' if loop.last else ',' !!}"
            "@endforeach"
        )
        assert template.render(items=[1, 2, 3]) == "[1,2,3]"

    def test_cycle_in_template(self, env) -> None:
        template = env.from_string(
            "@foreach(items as item)<tr class=\"{{ loop.cycle('odd', 'even') }}\">@endforeach"
        )
        assert template.render(items=[1, 2]) == '<tr class="odd"><tr class="even">'

    def test_parent_loop(self, env) -> None:
        template = env.from_string(
            "@foreach(rows as row)<@foreach(row as cell)"
            "{{ loop.parent.index }}.{{ loop.index }}:{{ loop.depth }} "
            "@endforeach>@endforeach"
        )
        assert template.render(rows=[["a", "b"], ["c"]]) == "<1.1:2 1.2:2 ><2.1:2 >"

    def test_loop_in_for_directive(self, env) -> None:
        assert env.render_string("@for(i in range(2)){{ loop.remaining }}@endfor") == "10"

    def test_loop_target_named_loop(self, env) -> None:
        template = env.from_string("@foreach(items as loop){{ loop }}@endforeach")
        assert template.render(items=[1, 2]) == "12"

    def test_loop_over_generator_with_loop_context(self, env) -> None:
        template = env.from_string("@foreach(items as i){{ loop.index }}{{ i }}@endforeach")
        assert template.render(items=(c for c in "ab")) == "1a2b"

    def test_loop_outside_loop_is_context_lookup(self, env) -> None:
        assert env.render_string("{{ loop }}", loop="ctx") == "ctx"
