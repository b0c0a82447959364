"""Tests for control flow and @include rendering."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from wafview import TemplateNotFoundError, TemplateRenderError, TemplateTooDeepError


class TestIf:
    """@if / @elseif / @else."""

    @pytest.mark.parametrize(
        ("role", "expected"),
        [("admin", "A"), ("member", "M"), ("guest", "G"), (None, "G")],
    )
    def test_branches(self, env, role, expected) -> None:
        template = env.from_string(
            "@if(role == 'admin') A @elseif(role == 'member') M @else G @endif"
        )
        assert template.render(role=role).strip() == expected

    def test_if_without_else(self, env) -> None:
        template = env.from_string("[@if(show)shown @endif]")
        assert template.render(show=True) == "[shown ]"
        assert template.render(show=False) == "[]"

    def test_python_truthiness(self, env) -> None:
        template = env.from_string("@if(items)some @else none @endif")
        assert template.render(items=[]).strip() == "none"
        assert template.render(items=[0]).strip() == "some"

    def test_nested_if(self, env) -> None:
        template = env.from_string(
            "@if(a)<a>@if(b)<b>@else<nb>@endif</a>@else<na>@endif"
        )
        assert template.render(a=True, b=True) == "<a><b></a>"
        assert template.render(a=True, b=False) == "<a><nb></a>"
        assert template.render(a=False, b=True) == "<na>"

    def test_boolean_operators_and_calls(self, env) -> None:
        template = env.from_string("@if(len(items) > 1 and not hidden)many @endif")
        assert template.render(items=[1, 2], hidden=False) == "many "


class TestForeach:
    """@foreach and @for."""

    def test_as_form(self, env) -> None:
        template = env.from_string("@foreach(items as item)<li>{{ item }}</li>@endforeach")
        assert template.render(items=["a", "b"]) == "<li>a</li><li>b</li>"

    def test_in_form(self, env) -> None:
        template = env.from_string("@foreach(item in items)[{{ item }}]@endforeach")
        assert template.render(items=[1, 2, 3]) == "[1][2][3]"

    def test_for_with_range(self, env) -> None:
        assert env.render_string("@for(i in range(3)){{ i }}@endfor") == "012"

    def test_tuple_unpacking(self, env) -> None:
        template = env.from_string(
            "@foreach(prices.items() as name, price){{ name }}={{ price }};@endforeach"
        )
        assert template.render(prices={"tea": 2, "cake": 3}) == "tea=2;cake=3;"

    def test_none_iterable_renders_nothing(self, env) -> None:
        template = env.from_string("[@foreach(items as item){{ item }}@endforeach]")
        assert template.render(items=None) == "[]"

    def test_empty_iterable(self, env) -> None:
        template = env.from_string("[@foreach(items as item){{ item }}@endforeach]")
        assert template.render(items=[]) == "[]"

    def test_nested_loops(self, env) -> None:
        template = env.from_string(
            "@foreach(rows as row)(@foreach(row as cell){{ cell }}@endforeach)@endforeach"
        )
        assert template.render(rows=[[1, 2], [3]]) == "(12)(3)"

    def test_nested_loops_same_variable_name(self, env) -> None:
        template = env.from_string(
            "@foreach(outer as x)<@foreach(x as x){{ x }}@endforeach>{{ x }}@endforeach"
        )
        assert template.render(outer=["ab", "cd"]) == "<ab>ab<cd>cd"

    def test_loop_variable_shadows_context(self, env) -> None:
        template = env.from_string(
            "{{ item }}|@foreach(items as item){{ item }}@endforeach|{{ item }}"
        )
        assert template.render(item="ctx", items=[1, 2]) == "ctx|12|ctx"

    def test_loop_over_attribute(self, env) -> None:
        user = SimpleNamespace(roles=["r1", "r2"])
        template = env.from_string("@foreach(user.roles as role){{ role }} @endforeach")
        assert template.render(user=user) == "r1 r2 "

    def test_comprehension_inside_loop(self, env) -> None:
        template = env.from_string(
            "@foreach(groups as group){{ [n * factor for n in group] }}@endforeach"
        )
        assert template.render(groups=[[1], [2, 3]], factor=10) == "[10][20, 30]"

    def test_lambda_in_expression(self, env) -> None:
        template = env.from_string("{{ sorted(words, key=lambda w: len(w)) }}")
        assert template.render(words=["ccc", "a", "bb"]) == "[&#39;a&#39;, &#39;bb&#39;, &#39;ccc&#39;]"

    def test_generator_iterable(self, env) -> None:
        template = env.from_string("@foreach(items as item){{ item }}@endforeach")
        assert template.render(items=(i * 2 for i in range(3))) == "024"


class TestWhile:
    """@while loops."""

    def test_while_consumes_queue(self, env) -> None:
        template = env.from_string("@while(queue){{ queue.pop(0) }}@endwhile")
        assert template.render(queue=[1, 2, 3]) == "123"

    def test_while_false_renders_nothing(self, env) -> None:
        assert env.render_string("[@while(False)x @endwhile]") == "[]"

    def test_while_with_counter_object(self, env) -> None:
        counter = iter(range(3))
        template = env.from_string("@while(next(it, None) is not None)* @endwhile")
        assert template.render(it=counter, next=next) == "* * * "


class TestInclude:
    """@include renders a partial inline."""

    def test_include_with_data(self, make_env) -> None:
        env = make_env(
            {
                "partials.badge": "<span>{{ label }}</span>",
                "page": "@include('partials.badge', {'label': 'new'})",
            }
        )
        assert env.render("page") == "<span>new</span>"

    def test_include_data_expression(self, make_env) -> None:
        env = make_env(
            {
                "row": "<td>{{ cell }}</td>",
                "table": "@foreach(cells as c)@include('row', {'cell': c})@endforeach",
            }
        )
        assert env.render("table", cells=[1, 2]) == "<td>1</td><td>2</td>"

    def test_include_does_not_see_caller_data(self, make_env) -> None:
        env = make_env(
            {
                "partial": "[{{ secret }}]",
                "page": "@include('partial')",
            },
            strict=False,
        )
        assert env.render("page", secret="s3cret") == "[]"

    def test_include_sees_globals_and_shared(self, make_env) -> None:
        env = make_env(
            {"partial": "{{ app_name }}:{{ len(items) }}", "page": "@include('partial', {'items': [1]})"}
        )
        env.share("app_name", "Demo")
        assert env.render("page") == "Demo:1"

    def test_include_data_overrides_shared(self, make_env) -> None:
        env = make_env({"partial": "{{ who }}", "page": "@include('partial', {'who': 'local'})"})
        env.share("who", "shared")
        assert env.render("page") == "local"

    def test_include_cannot_modify_caller(self, make_env) -> None:
        env = make_env(
            {
                "partial": "{{ data.append(1) }}",
                "page": "@include('partial', {'data': []}){{ len(data) }}",
            }
        )
        assert env.render("page", data=[]) == "0"

    def test_include_output_is_not_reescaped(self, make_env) -> None:
        env = make_env({"partial": "<b>{{ v }}</b>", "page": "@include('partial', {'v': '<'})"})
        assert env.render("page") == "<b>&lt;</b>"

    def test_missing_partial(self, make_env) -> None:
        env = make_env({"page": "@include('partials.nope')"})
        with pytest.raises(TemplateNotFoundError) as exc_info:
            env.render("page")
        assert exc_info.value.name == "partials.nope"

    def test_non_mapping_data(self, make_env) -> None:
        env = make_env({"partial": "x", "page": "@include('partial', [1, 2])"})
        with pytest.raises(TemplateRenderError) as exc_info:
            env.render("page")
        assert isinstance(exc_info.value.cause, TypeError)
        assert exc_info.value.template_name == "page"

    def test_recursive_include_hits_depth_limit(self, make_env) -> None:
        env = make_env({"tree": "@include('tree')"}, max_depth=5)
        with pytest.raises(TemplateTooDeepError) as exc_info:
            env.render("tree")
        assert exc_info.value.depth == 5

    def test_bounded_recursive_include(self, make_env) -> None:
        env = make_env(
            {
                "node": (
                    "<{{ node['name'] }}>"
                    "@foreach(node['children'] as child)@include('node', {'node': child})@endforeach"
                    "</{{ node['name'] }}>"
                )
            }
        )
        tree = {"name": "a", "children": [{"name": "b", "children": []}]}
        assert env.render("node", node=tree) == "<a><b></b></a>"


class TestAdjacentDirectives:
    """Directives glued to each other or to text still render."""

    def test_nested_closers_back_to_back(self, env) -> None:
        template = env.from_string("@foreach(xs as x)@if(x)<{{ x }}>@endif@endforeach")
        assert template.render(xs=[1, 0, 2]) == "<1><2>"

    def test_section_closer_after_loop_closer(self, make_env) -> None:
        env = make_env(
            {
                "base": "[@yield('c')]",
                "page": (
                    "@extends('base')@section('c')"
                    "@foreach(xs as x){{ x }}@endforeach@endsection"
                ),
            }
        )
        assert env.render("page", xs=[1, 2]) == "[12]"

    def test_else_glued_to_word(self, env) -> None:
        template = env.from_string("@if(ok)Yes@else No@endif")
        assert template.render(ok=True) == "Yes"
        assert template.render(ok=False) == " No"

    def test_blocks_back_to_back(self, env) -> None:
        template = env.from_string("@if(a)A@endif@if(b)B@endif")
        assert template.render(a=True, b=True) == "AB"
        assert template.render(a=False, b=True) == "B"

    def test_while_closer_glued(self, env) -> None:
        assert env.render_string("@while(q){{ q.pop() }}x@endwhile", q=[1, 2]) == "2x1x"
