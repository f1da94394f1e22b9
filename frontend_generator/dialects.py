"""Output dialects for the implementation module.

One template renders both dialects; everything that differs between
TypeScript and JavaScript-with-JSDoc goes through a Dialect object:
type annotations, casts, imports and the private function header.
"""

from __future__ import annotations

from typing import Any


class Dialect:
    """Untyped base: annotations and casts render as nothing."""

    language = ""
    extension = ""
    typed = False
    emits_types = False

    def __init__(self, name: str, client_name: str):
        self.name = name
        self.client_name = client_name

    @property
    def types_module(self) -> str:
        return f"./{self.name}-types"

    @property
    def imports(self) -> list[str]:
        return []

    def annotate(self, type_: str) -> str:
        return ""

    def param(self, name: str, type_: str) -> str:
        return name

    def returns(self, type_: str) -> str:
        return ""

    def cast(self, expression: str, type_: str) -> str:
        return expression

    def jsdoc(self, member: str) -> str | None:
        return None

    def client_member(self, member: str) -> str:
        return ""

    def private_function(self, op: dict[str, Any]) -> str:
        return f"async function {op['private_name']} (url, request)"


class TypeScriptDialect(Dialect):
    language = "ts"
    extension = "ts"
    typed = True
    emits_types = True

    @property
    def imports(self) -> list[str]:
        return [
            f"import type {{ {self.client_name} }} from '{self.types_module}'",
            f"import type * as Types from '{self.types_module}'",
        ]

    def annotate(self, type_: str) -> str:
        return f": {type_}"

    def param(self, name: str, type_: str) -> str:
        return f"{name}: {type_}"

    def returns(self, type_: str) -> str:
        return f": {type_}"

    def cast(self, expression: str, type_: str) -> str:
        return f"{expression} as {type_}"

    def client_member(self, member: str) -> str:
        return f": {self.client_name}['{member}']"

    def private_function(self, op: dict[str, Any]) -> str:
        return (
            f"const {op['private_name']} = async ("
            f"{self.param('url', 'string')}, {self.param('request', op['request_type'])})"
            f"{self.returns('Promise<' + op['response_type'] + '>')} =>"
        )


class JavaScriptDialect(Dialect):
    """ES module with JSDoc pointing at the generated declarations."""

    language = "js"
    extension = "mjs"

    def jsdoc(self, member: str) -> str | None:
        return f"/** @type {{import('{self.types_module}.d.ts').{self.client_name}['{member}']}} */"


DIALECTS: dict[str, type[Dialect]] = {
    TypeScriptDialect.language: TypeScriptDialect,
    JavaScriptDialect.language: JavaScriptDialect,
}


def get_dialect(language: str, name: str, client_name: str) -> Dialect:
    """Instantiate the dialect registered for a language code."""
    try:
        dialect_cls = DIALECTS[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language {language!r}, expected one of {sorted(DIALECTS)}"
        ) from None
    return dialect_cls(name, client_name)
