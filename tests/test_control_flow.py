from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param("if (true) { 10 }", ("integer", 10), None, id="if-true"),
    pytest.param("if (false) { 10 }", ("null", None), None, id="if-false-no-else"),
    pytest.param("if (1) { 10 }", ("integer", 10), None, id="if-int-truthy"),
    pytest.param("if (0) { 10 }", ("integer", 10), None, id="if-zero-truthy"),
    pytest.param('if ("") { 10 }', ("integer", 10), None, id="if-empty-string-truthy"),
    pytest.param("if (1 < 2) { 10 }", ("integer", 10), None, id="if-compare"),
    pytest.param("if (1 > 2) { 10 }", ("null", None), None, id="if-compare-false"),
    pytest.param("if (1 > 2) { 10 } else { 20 }", ("integer", 20), None, id="if-else"),
    pytest.param("if (1 < 2) { 10 } else { 20 }", ("integer", 10), None, id="if-else-then"),
    pytest.param(
        "if (if (false) { 1 }) { 10 } else { 20 }",
        ("integer", 20),
        None,
        id="null-condition-falsy",
    ),
    pytest.param("if (true) { }", ("null", None), None, id="empty-block"),
    pytest.param("let x = if (true) { 5 }; x * 2", ("integer", 10), None, id="if-as-value"),
    pytest.param("return 10;", ("integer", 10), None, id="return-top-level"),
    pytest.param("return 10; 9;", ("integer", 10), None, id="return-stops-program"),
    pytest.param("return 2 * 5; 9;", ("integer", 10), None, id="return-expression"),
    pytest.param("9; return 2 * 5; 9;", ("integer", 10), None, id="return-mid-program"),
    pytest.param("return;", ("null", None), None, id="bare-return"),
    pytest.param("return; 5", ("null", None), None, id="bare-return-stops"),
    pytest.param(
        dedent(
            """\
            if (10 > 1) {
              if (10 > 1) {
                return 10;
              }

              return 1;
            }
            """
        ),
        ("integer", 10),
        None,
        id="nested-return-unwinds-blocks",
    ),
    pytest.param(
        dedent(
            """\
            let f = fn(x) {
              return x;
              x + 10;
            };
            f(10);
            """
        ),
        ("integer", 10),
        None,
        id="return-in-function",
    ),
    pytest.param(
        dedent(
            """\
            let f = fn(x) {
               let result = x + 10;
               return result;
               return 10;
            };
            f(10);
            """
        ),
        ("integer", 20),
        None,
        id="first-return-wins",
    ),
    pytest.param(
        dedent(
            """\
            let inner = fn() { return 1; };
            let outer = fn() { inner(); 2 };
            outer()
            """
        ),
        ("integer", 2),
        None,
        id="return-does-not-escape-callee",
    ),
    pytest.param("let x = 5;", ("null", None), None, id="let-yields-null"),
    pytest.param("", ("null", None), None, id="empty-program"),
    pytest.param("1; 2; 3", ("integer", 3), None, id="last-statement-wins"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_control_flow(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)
