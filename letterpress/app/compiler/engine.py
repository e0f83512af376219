"""
Jinja2 template engine boundary.

One Environment per Encoding: PLAIN_TEXT renders verbatim, HTML
auto-escapes substituted values. Both use StrictUndefined so a variable
missing at render time fails loudly instead of rendering empty.

Variable roots are extracted from the parsed AST with
``jinja2.meta.find_undeclared_variables``: ``{{ order.id }}`` yields
``order`` and loop and ``set`` targets are excluded. Roots naming an
engine global (``range``, ``dict``, ...) are kept and also listed in
``builtins``; a data field of the same name shadows the global.
"""

from __future__ import annotations

from typing import Dict, Optional

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, meta

from letterpress.app.compiler.compiled import CompiledFragment
from letterpress.app.errors import TemplateCompilationError
from letterpress.app.schemas.schema import Encoding


def _environment(*, autoescape: bool) -> Environment:
    return Environment(
        undefined=StrictUndefined,
        autoescape=autoescape,
        keep_trailing_newline=True,
    )


class TemplateEngine:
    """
    Compiles raw template strings into CompiledFragments.
    """

    def __init__(self, environments: Optional[Dict[Encoding, Environment]] = None) -> None:
        self._environments: Dict[Encoding, Environment] = {
            Encoding.PLAIN_TEXT: _environment(autoescape=False),
            Encoding.HTML: _environment(autoescape=True),
        }
        if environments:
            self._environments.update(environments)

    def environment(self, encoding: Encoding) -> Environment:
        return self._environments[encoding]

    def compile(self, source: str, encoding: Encoding) -> CompiledFragment:
        env = self.environment(encoding)

        # TemplateAssertionError (unknown filter or test) is raised by the
        # code generator and subclasses TemplateSyntaxError
        try:
            ast = env.parse(source)
            template = env.from_string(ast)
        except TemplateSyntaxError as exc:
            raise TemplateCompilationError(exc.message or str(exc), lineno=exc.lineno) from exc

        variables = frozenset(meta.find_undeclared_variables(ast))

        return CompiledFragment(
            source=source,
            encoding=encoding,
            template=template,
            variables=variables,
            builtins=frozenset(name for name in variables if name in env.globals),
        )
