"""
Shared constants for the code units query layer.
"""

# Name given to sources without one and to the synthetic wrappers used
# when parsing code fragments
DEFAULT_NAME = "MISSING"

# Synthetic wrappers for fragment parsing. Fragment text is spliced in
# between the prefix and the suffix.
TYPE_BODY_PREFIX = f"class {DEFAULT_NAME} {{\n"
TYPE_BODY_SUFFIX = "\n}"
STATEMENTS_PREFIX = f"class {DEFAULT_NAME} {{\nvoid {DEFAULT_NAME}() {{\n"
STATEMENTS_SUFFIX = "\n}\n}"

# tree-sitter node types, grouped by the program units they represent
TYPE_DECLARATIONS = frozenset({
    'class_declaration',
    'interface_declaration',
    'enum_declaration',
    'record_declaration',
    'annotation_type_declaration',
})

METHOD_DECLARATIONS = frozenset({
    'method_declaration',
    'constructor_declaration',
    'compact_constructor_declaration',
})

FIELD_DECLARATIONS = frozenset({
    'field_declaration',
    'constant_declaration',
})

PARAMETER_DECLARATIONS = frozenset({
    'formal_parameter',
    'spread_parameter',
    'catch_formal_parameter',
})

LOCAL_VARIABLE_DECLARATIONS = frozenset({
    'local_variable_declaration',
})

TYPE_BODIES = frozenset({
    'class_body',
    'interface_body',
    'enum_body',
    'enum_body_declarations',
    'annotation_type_body',
})

PRIMITIVE_TYPES = frozenset({
    'boolean', 'byte', 'char', 'short', 'int', 'long', 'float', 'double', 'void',
})

# Simple names resolved against java.lang when nothing else declares them
JAVA_LANG_TYPES = frozenset({
    'Object', 'String', 'System', 'Math', 'Integer', 'Long', 'Short', 'Byte',
    'Character', 'Boolean', 'Double', 'Float', 'Number', 'Void', 'Class',
    'Enum', 'Record', 'Iterable', 'Comparable', 'CharSequence', 'Runnable',
    'Thread', 'StringBuilder', 'StringBuffer', 'Throwable', 'Exception',
    'Error', 'RuntimeException', 'IllegalArgumentException',
    'IllegalStateException', 'NullPointerException',
    'UnsupportedOperationException', 'IndexOutOfBoundsException',
    'ArithmeticException', 'ClassCastException', 'InterruptedException',
    'CloneNotSupportedException', 'Override', 'Deprecated',
    'SuppressWarnings', 'FunctionalInterface', 'SafeVarargs', 'AutoCloseable',
    'Cloneable',
})

OBJECT_TYPE = "java.lang.Object"

BLOCKS = frozenset({
    'block',
    'constructor_body',
})

STATEMENT_TYPES = frozenset({
    'block',
    'local_variable_declaration',
    'expression_statement',
    'labeled_statement',
    'if_statement',
    'while_statement',
    'for_statement',
    'enhanced_for_statement',
    'do_statement',
    'try_statement',
    'try_with_resources_statement',
    'switch_expression',
    'synchronized_statement',
    'assert_statement',
    'return_statement',
    'yield_statement',
    'throw_statement',
    'break_statement',
    'continue_statement',
    'explicit_constructor_invocation',
})

# Declarations whose bodies hold local declarations
BODY_DECLARATIONS = frozenset({
    'method_declaration',
    'constructor_declaration',
    'compact_constructor_declaration',
    'static_initializer',
})

# Nodes that declare a variable through a ``name`` field
VARIABLE_DECLARATORS = frozenset({
    'variable_declarator',
    'formal_parameter',
    'spread_parameter',
    'catch_formal_parameter',
    'enhanced_for_statement',
    'resource',
})

ERROR_NODE = 'ERROR'
