"""TypeScript-like target: structurally typed module with async stubs."""

from ..models import Class, Enum, Module, Route
from ..utils import IDENTIFIER, escape_single_quoted as ss
from .base import Emitter, ParameterMode, arrange_parameters

# Words that cannot name a module object or a function parameter.
RESERVED = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete",
        "do", "else", "enum", "export", "extends", "false", "finally", "for", "function", "if",
        "import", "in", "instanceof", "new", "null", "return", "super", "switch", "this", "throw",
        "true", "try", "typeof", "var", "void", "while", "with", "yield", "let", "static",
        "implements", "interface", "package", "private", "protected", "public", "await", "settings",
    }
)


class TsEmitter(Emitter):
    """Emits ``export const`` modules, interfaces, enums and type aliases."""

    target = "ts"
    unique_name_separator = "$"
    default_runtime_pkg_name = "@huolala-tech/nad-runtime"
    reserved_words = RESERVED

    def emit(self) -> str:
        self.write_template(
            self.jinja_environment(),
            "ts_preamble.ts.j2",
            no_head=self.options.no_head,
            runtime_pkg_name=self.runtime_pkg_name,
            base=self.options.base,
        )
        self.write("")
        for module in self.root.modules:
            self.write_module(module)
        for clz in self.root.declaration_list:
            self.write_class(clz)
        for enum in self.root.enum_list:
            self.write_enum(enum)
        # Aliases go last: they are registered while everything above is resolved
        for alias, underlying in self.root.common_defs.items():
            self.write(f"export type {alias} = {underlying};", "")
        return self.writer.render()

    # =========================================================================
    # Modules and routes
    # =========================================================================

    def write_module(self, module: Module) -> None:
        with self.writer.comment():
            self.write(module.display_name or module.identifier)
            self.write(f"@iface {module.name}")
        self.write(f"export const {module.identifier} = {{")
        with self.writer.block():
            for route in module.routes:
                self.write_route(route)
        self.write("};", "")

    def parameter_list(self, route: Route, names: list[str]) -> list[str]:
        pars = []
        for name, (parameter, mode) in zip(names, arrange_parameters(route.exposed_parameters)):
            type_str = self.t2s(parameter.type)
            if mode is ParameterMode.REQUIRED:
                pars.append(f"{name}: {type_str}")
            elif mode is ParameterMode.NULLABLE:
                pars.append(f"{name}: {type_str} | null")
            else:
                pars.append(f"{name}?: {type_str}")
        pars.append("settings?: Partial<Settings>")
        return pars

    def write_route(self, route: Route) -> None:
        names = self.parameter_names(route)
        pars = self.parameter_list(route, names)
        with self.writer.comment():
            self.write(route.description or route.name)
            for name, parameter in zip(names, route.exposed_parameters):
                if parameter.description:
                    self.write(f"@param {name} {parameter.description}")
        self.write(f"async {route.uniq_name}({', '.join(pars)}) {{")
        with self.writer.block():
            self.write(f"return new NadInvoker<{self.t2s(route.return_type)}>(BASE)")
            with self.writer.block():
                self.write(f".open({ss(route.method)}, {ss(route.pattern)}, settings)")
                if route.request_content_type:
                    self.write(f".addHeader({ss('Content-Type')}, {ss(route.request_content_type)})")
                for name, parameter in zip(names, route.exposed_parameters):
                    for action in parameter.actions:
                        args = [ss(arg) for arg in action.args] + [name]
                        self.write(f".{action.method}({', '.join(args)})")
                self.write(".execute();")
        self.write("},")

    # =========================================================================
    # Declarations
    # =========================================================================

    def write_class(self, clz: Class) -> None:
        with self.writer.comment():
            self.write(clz.description or clz.simple_name)
            self.write(f"@iface {clz.name}")
        if not clz.members and clz.superclass is not None:
            self.write(f"export type {clz.def_name} = {self.t2s(clz.superclass)};", "")
            return
        head = clz.def_name
        if clz.superclass is not None:
            parent = self.t2s(clz.superclass)
            if parent != self.resolver.grammar.unknown:
                head += f" extends {parent}"
        if not clz.members:
            self.write(f"export interface {head} {{}}", "")
            return
        self.write(f"export interface {head} {{")
        with self.writer.block():
            for member in clz.members:
                if member.description:
                    with self.writer.comment():
                        self.write(member.description)
                key = member.name if IDENTIFIER.match(member.name) else ss(member.name)
                optional = "?" if member.optional else ""
                self.write(f"{key}{optional}: {self.t2s(member.type)};")
        self.write("}", "")

    def write_enum(self, enum: Enum) -> None:
        if enum.description:
            with self.writer.comment():
                self.write(enum.description)
        self.write(f"export enum {enum.simple_name} {{")
        with self.writer.block():
            for constant in enum.constants:
                if constant.description:
                    with self.writer.comment():
                        self.write(constant.description)
                self.write(f"{constant.name} = {ss(constant.value)},")
                self.amend_memo(constant.memo)
        self.write("}", "")
