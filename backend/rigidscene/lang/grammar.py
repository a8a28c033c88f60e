"""Grammar of the scene language, in lark EBNF.

Commas are whitespace. The start rule is `composite`, and the rule names are
the tag vocabulary the normalizer understands.
"""

PHYSICS_GRAMMAR = r"""
composite: (expr ";")*
?expr: primitive | fn | body | constraint | scope | label
scope: "{" composite "}" attrs?
body: shape attrs?
shape: SHAPE primitive*
?primitive: number | symbol | call
constraint: node edge node attrs?
?node: symbol | body
edge: rigid | spring | pin | rope
rigid: "--"
spring: "%%"
pin: "-o-" | "-.-"
rope: "~~"
attrs: "[" (flag | attr)* "]"
flag: symbol
attr: symbol "=" (primitive | vector)
vector: "[" primitive* "]"
label: symbol ":" expr
fn: "(" params "=>" expr ")"
params: symbol*
call: "(" symbol expr* ")"
symbol: SYMBOL
number: NUMBER

SHAPE.2: /(rectangle|circle|polygon|trapezoid|fromVertices)(?![a-zA-Z0-9_$*+\/-])/
NUMBER.2: /-?[0-9]+(\.[0-9]+)?/
SYMBOL: /(?!(--|-o-)(?![a-zA-Z0-9_$*+\/-]))(?!-[0-9])[a-zA-Z#_$*+\/-][a-zA-Z0-9_$*+\/-]*/

%ignore /[\s,]+/
"""

START_RULE = "composite"
