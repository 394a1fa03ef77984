"""Message-style target: Objective-C interfaces, properties and method stubs."""

from ..models import Class, Declaration, Enum, Module, Route
from ..resolver import TypeGrammar
from ..types import TypeKind
from ..utils import escape_objc_string as ns, fix_identifier, to_upper_camel
from .base import Emitter, ParameterMode, arrange_parameters

RESERVED = frozenset(
    {
        "auto", "break", "case", "char", "const", "continue", "default", "do", "double", "else",
        "enum", "extern", "float", "for", "goto", "if", "inline", "int", "long", "register",
        "return", "short", "signed", "sizeof", "static", "struct", "switch", "typedef", "union",
        "unsigned", "void", "volatile", "while", "id", "self", "super", "nil", "Nil", "YES", "NO",
        "BOOL", "SEL", "IMP", "Class", "Protocol", "in", "out", "inout", "bycopy", "byref",
        "oneway", "class", "description", "hash", "copy", "new", "alloc", "init", "retain",
        "release", "autorelease", "settings",
    }
)


class ObjcGrammar(TypeGrammar):
    """Object pointer types; the wide numeric and special types need no aliases."""

    unknown = "NSObject*"
    property_key = "id<NSCopying>"

    primitives = {
        TypeKind.NUMBER: "NSNumber*",
        TypeKind.TEXT: "NSString*",
        TypeKind.BOOLEAN: "NSNumber*",
    }

    specials = {
        TypeKind.DECIMAL: (None, "NSNumber*"),
        TypeKind.BIG_INTEGER: (None, "NSNumber*"),
        TypeKind.FILE_UPLOAD: (None, "NSData*"),
        TypeKind.WIDE_INTEGER: (None, "NSNumber*"),
    }

    optional_alias = None

    def void(self, nested: bool) -> str:
        # A generic argument must be an object type
        return self.unknown if nested else "void"

    def map_of(self, key: str, value: str) -> str:
        return f"NSDictionary<{key}, {value}>*"

    def list_of(self, item: str) -> str:
        return f"NSArray<{item}>*"

    def optional_of(self, item: str) -> str:
        return item

    def tuple_of(self, items: list[str]) -> str:
        return "NSArray*"

    def generic(self, declaration: Class, arguments: list[str]) -> str:
        return f"{declaration.simple_name}<{', '.join(arguments)}>*"

    def declared(self, declaration: Declaration) -> str:
        if isinstance(declaration, Enum):
            # Numeric enums are NS_ENUM integers, boxed when used as objects
            return "NSNumber*" if declaration.value_type == "number" else declaration.simple_name
        return f"{declaration.simple_name}*"


def declare(type_str: str, name: str) -> str:
    """``NSNumber*`` + ``limit`` -> ``NSNumber *limit``."""
    if type_str.endswith("*"):
        return f"{type_str[:-1]} *{name}"
    return f"{type_str} {name}"


class ObjcEmitter(Emitter):
    """Emits @interface declarations followed by their @implementation blocks."""

    target = "oc"
    unique_name_separator = "_"
    default_runtime_pkg_name = "NadRuntime.h"
    reserved_words = RESERVED

    def create_grammar(self) -> TypeGrammar:
        return ObjcGrammar()

    def emit(self) -> str:
        self.write_template(
            self.jinja_environment(),
            "oc_preamble.m.j2",
            no_head=self.options.no_head,
            runtime_pkg_name=self.runtime_pkg_name,
            base=self.options.base,
            forward_classes=[c.simple_name for c in self.root.declaration_list]
            + [self.module_class_name(m) for m in self.root.modules],
        )
        self.write("")
        for enum in self.root.enum_list:
            self.write_enum(enum)
        for clz in self.root.declaration_list:
            self.write_class_interface(clz)
        for module in self.root.modules:
            self.write_module_interface(module)
        for clz in self.root.declaration_list:
            self.write(f"@implementation {clz.simple_name}", "@end", "")
        for module in self.root.modules:
            self.write_module_implementation(module)
        return self.writer.render()

    @staticmethod
    def module_class_name(module: Module) -> str:
        return to_upper_camel(module.identifier)

    # =========================================================================
    # Declarations
    # =========================================================================

    def write_enum(self, enum: Enum) -> None:
        if enum.description:
            with self.writer.comment():
                self.write(enum.description)
        if enum.value_type == "number":
            self.write(f"typedef NS_ENUM(NSInteger, {enum.simple_name}) {{")
            with self.writer.block():
                for constant in enum.constants:
                    self._write_constant_doc(constant.description)
                    self.write(f"{self.constant_name(enum, constant.name)} = {constant.value},")
                    self.amend_memo(constant.memo)
            self.write("};", "")
            return
        self.write(f"typedef NSString *{enum.simple_name} NS_STRING_ENUM;")
        for constant in enum.constants:
            self._write_constant_doc(constant.description)
            self.write(
                f"static {enum.simple_name} const {self.constant_name(enum, constant.name)} = {ns(constant.value)};"
            )
            self.amend_memo(constant.memo)
        self.write("")

    @staticmethod
    def constant_name(enum: Enum, name: str) -> str:
        return f"{enum.simple_name}{to_upper_camel(name.lower())}"

    def _write_constant_doc(self, description: str) -> None:
        if description:
            with self.writer.comment():
                self.write(description)


    def write_class_interface(self, clz: Class) -> None:
        with self.writer.comment():
            self.write(clz.description or clz.simple_name)
            self.write(f"@JavaClass {clz.name}")
        parent = "NSObject"
        if clz.superclass is not None:
            resolved = self.t2s(clz.superclass)
            if resolved != self.resolver.grammar.unknown and resolved.endswith("*"):
                parent = resolved[:-1]
        self.write(f"@interface {clz.def_name} : {parent}")
        for member in clz.members:
            if member.description:
                with self.writer.comment():
                    self.write(member.description)
            name = fix_identifier(member.name, RESERVED)
            self.write(f"@property (nonatomic, assign) {declare(self.t2s(member.type), name)};")
        self.write("@end", "")

    # =========================================================================
    # Modules and routes
    # =========================================================================

    def signature(self, route: Route) -> str:
        return_type = self.t2s(route.return_type)
        pieces = []
        names = self.parameter_names(route)
        for index, (name, (parameter, mode)) in enumerate(zip(names, arrange_parameters(route.exposed_parameters))):
            nullability = "" if mode is ParameterMode.REQUIRED else "nullable "
            label = route.uniq_name if index == 0 else name
            pieces.append(f"{label}:({nullability}{self.t2s(parameter.type)}){name}")
        selector = " ".join(pieces) if pieces else route.uniq_name
        return f"- ({return_type}){selector}"

    def write_module_interface(self, module: Module) -> None:
        with self.writer.comment():
            self.write(module.display_name or module.identifier)
            self.write(f"@JavaClass {module.name}")
        self.write(f"@interface {self.module_class_name(module)} : NSObject")
        for route in module.routes:
            with self.writer.comment():
                self.write(route.description or route.name)
                for name, parameter in zip(self.parameter_names(route), route.exposed_parameters):
                    if parameter.description:
                        self.write(f"@param {name} {parameter.description}")
            self.write(f"{self.signature(route)};")
        self.write("@end", "")

    def write_module_implementation(self, module: Module) -> None:
        self.write(f"@implementation {self.module_class_name(module)}")
        for route in module.routes:
            self.write(f"{self.signature(route)} {{")
            with self.writer.block():
                self.write_route_body(route)
            self.write("}")
        self.write("@end", "")

    def write_route_body(self, route: Route) -> None:
        self.write("NadInvoker *invoker = [[NadInvoker alloc] initWithBase:BASE];")
        self.write(f"[invoker open:{ns(route.method)} pattern:{ns(route.pattern)} settings:nil];")
        if route.request_content_type:
            self.write(f"[invoker addHeader:{ns('Content-Type')} value:{ns(route.request_content_type)}];")
        for name, parameter in zip(self.parameter_names(route), route.exposed_parameters):
            for action in parameter.actions:
                if action.args:
                    self.write(f"[invoker {action.method}:{ns(action.args[0])} value:{name}];")
                else:
                    self.write(f"[invoker {action.method}:{name}];")
        if self.t2s(route.return_type) == "void":
            self.write("[invoker execute];")
        else:
            self.write("return [invoker execute];")
