from __future__ import annotations

from textwrap import dedent

import pytest

from monkey.runtime import new_environment
from monkey.types import MkFn
from tests.support.harness import run_program, run_runtime_case

SCENARIOS = [
    pytest.param("fn(x) { x + 2; };", ("fn", ["x"]), None, id="literal"),
    pytest.param("fn(x) { x + 2; };", ("inspect", "fn(x) { (x + 2) }"), None, id="literal-inspect"),
    pytest.param("fn() { }", ("inspect", "fn() { }"), None, id="nullary-inspect"),
    pytest.param("let identity = fn(x) { x; }; identity(5);", ("integer", 5), None, id="identity"),
    pytest.param(
        "let identity = fn(x) { return x; }; identity(5);",
        ("integer", 5),
        None,
        id="identity-return",
    ),
    pytest.param("let double = fn(x) { x * 2; }; double(5);", ("integer", 10), None, id="double"),
    pytest.param("let add = fn(x, y) { x + y; }; add(5, 5);", ("integer", 10), None, id="add"),
    pytest.param(
        "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));",
        ("integer", 20),
        None,
        id="nested-call-args",
    ),
    pytest.param("fn(x) { x; }(5)", ("integer", 5), None, id="immediate-call"),
    pytest.param("fn() { }()", ("null", None), None, id="empty-body-returns-null"),
    pytest.param(
        dedent(
            """\
            let newAdder = fn(x) {
              fn(y) { x + y };
            };

            let addTwo = newAdder(2);
            addTwo(2);
            """
        ),
        ("integer", 4),
        None,
        id="closure-new-adder",
    ),
    pytest.param(
        dedent(
            """\
            let add = fn(a, b) { a + b };
            let applyFunc = fn(a, b, func) { func(a, b) };
            applyFunc(2, 2, add);
            """
        ),
        ("integer", 4),
        None,
        id="higher-order",
    ),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n < 2) { return n; }
              fib(n - 1) + fib(n - 2)
            };
            fib(15)
            """
        ),
        ("integer", 610),
        None,
        id="recursion-fib",
    ),
    pytest.param(
        dedent(
            """\
            let counter = fn(x) {
              if (x > 20) {
                return true;
              } else {
                let foobar = 9999;
                counter(x + 1);
              }
            };
            counter(0);
            """
        ),
        ("bool", True),
        None,
        id="recursion-depth-20",
    ),
    pytest.param(
        "let sum = fn(n) { if (n == 0) { 0 } else { n + sum(n - 1) } }; sum(1000)",
        ("integer", 500500),
        None,
        id="recursion-depth-1000",
    ),
    pytest.param(
        dedent(
            """\
            let countdown = fn(n) {
              if (n == 0) { return 0; }
              let next = n - 1;
              countdown(next)
            };
            countdown(1500)
            """
        ),
        ("integer", 0),
        None,
        id="recursion-depth-1500-return",
    ),
    pytest.param(
        dedent(
            """\
            let map = fn(arr, f) {
              let iter = fn(arr, acc) {
                if (len(arr) == 0) { acc } else { iter(rest(arr), push(acc, f(first(arr)))) }
              };
              iter(arr, [])
            };
            let range = fn(n, acc) { if (n == 0) { acc } else { range(n - 1, push(acc, n)) } };
            let total = fn(arr) { if (len(arr) == 0) { 0 } else { first(arr) + total(rest(arr)) } };
            total(map(range(300, []), fn(x) { x * 2 }))
            """
        ),
        ("integer", 90300),
        None,
        id="map-over-300-elements",
    ),
    pytest.param(
        dedent(
            """\
            let compose = fn(f, g) { fn(x) { g(f(x)) } };
            let inc = fn(x) { x + 1 };
            let dbl = fn(x) { x * 2 };
            compose(inc, dbl)(5)
            """
        ),
        ("integer", 12),
        None,
        id="compose",
    ),
    pytest.param(
        "let f = fn(x) { x }; f(1, 2)",
        ("error", "wrong number of arguments: want=1, got=2"),
        None,
        id="too-many-args",
    ),
    pytest.param(
        "let f = fn(x, y) { x }; f(1)",
        ("error", "wrong number of arguments: want=2, got=1"),
        None,
        id="too-few-args",
    ),
    pytest.param("5()", ("error", "not a function: INTEGER"), None, id="call-integer"),
    pytest.param('"f"(1)', ("error", "not a function: STRING"), None, id="call-string"),
    pytest.param(
        "let f = fn(x) { x }; f(undefinedVar)",
        ("error", "identifier not found: undefinedVar"),
        None,
        id="argument-error",
    ),
    pytest.param(
        "missing(1)",
        ("error", "identifier not found: missing"),
        None,
        id="callee-error",
    ),
    pytest.param(
        "let f = fn() { let inner = 1; inner }; f(); inner",
        ("error", "identifier not found: inner"),
        None,
        id="locals-do-not-leak",
    ),
    pytest.param(
        "let x = 10; let f = fn(x) { x }; f(1) + x",
        ("integer", 11),
        None,
        id="param-shadows-outer",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_closure_sees_later_bindings_in_defining_scope() -> None:
    source = dedent(
        """\
        let getX = fn() { x };
        let x = 42;
        getX()
        """
    )

    run_runtime_case(source, ("integer", 42), None)


def test_closure_captures_environment_by_reference() -> None:
    env = new_environment()
    run_program("let f = fn() { y }; let y = 1;", env)
    run_program("let y = 2;", env)

    run_runtime_case("f()", ("integer", 2), None, env)


def test_function_value_keeps_defining_environment() -> None:
    env = new_environment()
    fn = run_program("let make = fn(a) { fn() { a } }; make(7)", env)

    assert isinstance(fn, MkFn)
    assert fn.params == []
    assert fn.env is not env
    assert fn.env.get("a").value == 7


def test_call_depth_cap(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONKEY_MAX_CALL_DEPTH", "50")
    source = "let loop = fn(n) { loop(n + 1) }; loop(0)"

    run_runtime_case(source, ("error", "maximum call depth exceeded: 50"), None)


def test_call_depth_cap_allows_shallow_recursion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONKEY_MAX_CALL_DEPTH", "50")
    source = "let down = fn(n) { if (n == 0) { 0 } else { down(n - 1) } }; down(30)"

    run_runtime_case(source, ("integer", 0), None)


def test_call_depth_resets_after_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONKEY_MAX_CALL_DEPTH", "20")
    run_runtime_case(
        "let loop = fn() { loop() }; loop()",
        ("error", "maximum call depth exceeded: 20"),
        None,
    )

    run_runtime_case("let f = fn(x) { x }; f(3)", ("integer", 3), None)


def test_unbounded_recursion_without_cap_is_fatal() -> None:
    with pytest.raises(RecursionError):
        run_program("let loop = fn() { loop() }; loop()")
