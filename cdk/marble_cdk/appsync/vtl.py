"""
VTL building blocks for the website metadata resolvers.

All resolvers address the same single table, so the fragments every mapping
template needs are rendered here once:

- id normalization (default, upper-case, strip spaces)
- DynamoDB request documents (GetItem, Query, UpdateItem, DeleteItem, batch)
- static SET/REMOVE update expressions and the dynamic partial-update builder
- error forwarding and paginated connection responses

Request documents are Python dicts rendered to JSON text. Values wrapped in
``Vtl`` are emitted verbatim so AppSync evaluates them; every other value is
JSON-encoded.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any, Optional

DYNAMODB_TEMPLATE_VERSION = "2017-02-28"
DEFAULT_PAGE_SIZE = 1000

# Attribute names that collide with DynamoDB reserved words
RESERVED_ATTRIBUTES = frozenset({"TYPE", "sequence"})

# Table bookkeeping never merged into API results
BOOKKEEPING_ATTRIBUTES = (
    "PK",
    "SK",
    "TYPE",
    "GSI1PK",
    "GSI1SK",
    "GSI2PK",
    "GSI2SK",
    "dateAddedToDynamo",
    "dateModifiedInDynamo",
)

NOW = "$util.time.nowISO8601()"
PAGE_LIMIT = f"$util.defaultIfNull($ctx.args.limit, {DEFAULT_PAGE_SIZE})"
NEXT_TOKEN_ARGUMENT = "$util.toJson($util.defaultIfNullOrBlank($ctx.args.nextToken, null))"
NEXT_TOKEN_RESULT = "$util.toJson($util.defaultIfNullOrBlank($ctx.result.nextToken, null))"

RAISE_ON_ERROR = """## Raise a GraphQL field error in case of a datasource invocation error
#if($ctx.error)
  $util.error($ctx.error.message, $ctx.error.type)
#end"""

EMPTY_REQUEST = "{}"


class Vtl(str):
    """A VTL expression emitted verbatim inside a rendered document."""


def quote(value: str) -> str:
    """Quote text as a VTL string literal. $variables inside it still interpolate."""
    return json.dumps(value)


def quote_list(values: Iterable[str]) -> str:
    """VTL list literal of strings."""
    return json.dumps(list(values))


def to_dynamodb(expression: str) -> Vtl:
    """Convert a VTL expression to its DynamoDB JSON representation at resolve time."""
    return Vtl(f"$util.dynamodb.toDynamoDBJson({expression})")


def render(document: Any, indent: int = 0) -> str:
    """Render a request document as JSON text, leaving Vtl values untouched."""
    if isinstance(document, Vtl):
        return str(document)
    pad = "  " * indent
    inner = "  " * (indent + 1)
    if isinstance(document, Mapping):
        if not document:
            return "{}"
        entries = [f"{inner}{json.dumps(name)}: {render(value, indent + 1)}" for name, value in document.items()]
        return "{\n" + ",\n".join(entries) + f"\n{pad}}}"
    if isinstance(document, (list, tuple)):
        if not document:
            return "[]"
        entries = [f"{inner}{render(value, indent + 1)}" for value in document]
        return "[\n" + ",\n".join(entries) + f"\n{pad}]"
    return json.dumps(document)


def template(*parts: str) -> str:
    """Join template fragments, one per line, skipping empty ones."""
    return "\n".join(part for part in parts if part)


def normalize_id(variable: str, source: str, default: str = '""') -> str:
    """Assign ``$variable`` the normalized form of ``source``.

    Normalized ids are upper-case with all spaces removed, so keys written and
    read by different resolvers always match.

    Args:
        variable: VTL variable name, without the leading $
        source: VTL expression providing the raw id
        default: VTL expression used when the source is null or blank
    """
    return template(
        f"#set(${variable} = $util.defaultIfNullOrBlank({source}, {default}))",
        f"#set(${variable} = $util.str.toUpper(${variable}))",
        f'#set(${variable} = $util.str.toReplace(${variable}, " ", ""))',
    )


def stash_put(name: str, expression: str) -> str:
    """Store a value in the resolver stash without echoing it into the template output."""
    return f"$util.qr($ctx.stash.put({quote(name)}, {expression}))"


def stash_request(values: Mapping[str, str]) -> str:
    """Request for a pipeline resolver that only seeds the stash for its functions."""
    return template(*(stash_put(name, expression) for name, expression in values.items()), EMPTY_REQUEST)


def key_block(pk: str, sk: str) -> dict[str, Vtl]:
    return {"PK": to_dynamodb(pk), "SK": to_dynamodb(sk)}


def expression_block(
    expression: str,
    values: Optional[Mapping[str, str]] = None,
    names: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    """Condition, query or filter block. Values are VTL expressions keyed by placeholder."""
    block: dict[str, Any] = {"expression": expression}
    if names:
        block["expressionNames"] = dict(names)
    if values:
        block["expressionValues"] = {placeholder: to_dynamodb(value) for placeholder, value in values.items()}
    return block


def type_filter(type_name: str, expression: str = "", values: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Filter block restricting results to one record TYPE, plus optional extra conditions."""
    clauses = ["#TYPE = :rowType"]
    if expression:
        clauses.append(expression)
    return expression_block(
        " and ".join(clauses),
        values={":rowType": quote(type_name), **(values or {})},
        names={"#TYPE": "TYPE"},
    )


def get_item(pk: str, sk: str) -> str:
    """GetItem request. pk and sk are VTL expressions."""
    return render(
        {
            "version": DYNAMODB_TEMPLATE_VERSION,
            "operation": "GetItem",
            "key": key_block(pk, sk),
        }
    )


def delete_item(pk: str, sk: str) -> str:
    return render(
        {
            "version": DYNAMODB_TEMPLATE_VERSION,
            "operation": "DeleteItem",
            "key": key_block(pk, sk),
        }
    )


def query(
    expression: str,
    values: Mapping[str, str],
    index: Optional[str] = None,
    filter_block: Optional[Mapping[str, Any]] = None,
    paginate: bool = True,
) -> str:
    """Query request against the table or one of its indexes.

    Args:
        expression: Key condition expression
        values: Placeholder to VTL expression mapping for the key condition
        index: Index name (GSI1, GSI2); None queries the table
        filter_block: Optional filter built with expression_block or type_filter
        paginate: Honor the field's limit and nextToken arguments

    Returns:
        The rendered request document
    """
    document: dict[str, Any] = {
        "version": DYNAMODB_TEMPLATE_VERSION,
        "operation": "Query",
    }
    if index:
        document["index"] = index
    document["query"] = expression_block(expression, values)
    if filter_block:
        document["filter"] = dict(filter_block)
    if paginate:
        document["limit"] = Vtl(PAGE_LIMIT)
        document["nextToken"] = Vtl(NEXT_TOKEN_ARGUMENT)
    return render(document)


def _attribute_ref(attribute: str, names: dict[str, str]) -> str:
    if attribute in RESERVED_ATTRIBUTES:
        names[f"#{attribute}"] = attribute
        return f"#{attribute}"
    return attribute


def update_expression(
    set_attributes: Iterable[str],
    remove_attributes: Iterable[str] = (),
    preserve_attributes: Iterable[str] = (),
) -> tuple[str, dict[str, str]]:
    """Build a static update expression.

    Each set attribute ``a`` is assigned the placeholder ``:a``. Preserved
    attributes are only written when absent (if_not_exists), which keeps
    creation timestamps stable across updates.

    >>> update_expression(["title", "TYPE"], remove_attributes=["GSI1PK"])
    ('SET title = :title, #TYPE = :TYPE REMOVE GSI1PK', {'#TYPE': 'TYPE'})

    Returns:
        The expression and the expressionNames needed for reserved words
    """
    names: dict[str, str] = {}
    clauses = [f"{_attribute_ref(a, names)} = :{a}" for a in set_attributes]
    for attribute in preserve_attributes:
        ref = _attribute_ref(attribute, names)
        clauses.append(f"{ref} = if_not_exists({ref}, :{attribute})")
    removals = [_attribute_ref(a, names) for a in remove_attributes]

    if not clauses and not removals:
        raise ValueError("An update expression needs at least one attribute to set or remove")

    sections = []
    if clauses:
        sections.append("SET " + ", ".join(clauses))
    if removals:
        sections.append("REMOVE " + ", ".join(removals))
    return " ".join(sections), names


def update_item(
    pk: str,
    sk: str,
    set_values: Mapping[str, str],
    remove_attributes: Iterable[str] = (),
    preserve_values: Optional[Mapping[str, str]] = None,
    condition: Optional[Mapping[str, Any]] = None,
) -> str:
    """UpdateItem request with a static expression.

    Args:
        pk: VTL expression for the partition key
        sk: VTL expression for the sort key
        set_values: Attribute to VTL expression mapping for SET
        remove_attributes: Attributes to REMOVE
        preserve_values: Attribute to VTL expression mapping written only if absent
        condition: Optional condition block

    Returns:
        The rendered request document
    """
    preserve_values = preserve_values or {}
    expression, names = update_expression(set_values, remove_attributes, preserve_values)
    update: dict[str, Any] = {"expression": expression}
    if names:
        update["expressionNames"] = names
    values = {**set_values, **preserve_values}
    if values:
        update["expressionValues"] = {f":{attribute}": to_dynamodb(value) for attribute, value in values.items()}

    document: dict[str, Any] = {
        "version": DYNAMODB_TEMPLATE_VERSION,
        "operation": "UpdateItem",
        "key": key_block(pk, sk),
        "update": update,
    }
    if condition:
        document["condition"] = dict(condition)
    return render(document)


def partial_update_request(
    pk: str,
    sk: str,
    args_variable: str,
    skip_keys: Iterable[str] = ("itemId", "expectedVersion"),
) -> str:
    """UpdateItem request whose expression is built from a map at resolve time.

    Every entry of ``$args_variable`` (except skip_keys) becomes a SET when it
    has a value and a REMOVE when it is null. When anything is set,
    dateAddedToDynamo is written if absent. An ``expectedVersion`` entry turns
    into an optimistic-lock condition on ``version``.

    Args:
        pk: VTL expression for the partition key
        sk: VTL expression for the sort key
        args_variable: Name of the VTL map variable, without the leading $
        skip_keys: Entries of the map that are not item attributes
    """
    args = f"${args_variable}"
    skipped = json.dumps(list(skip_keys))
    builder = f"""#set($expNames = {{}})
#set($expValues = {{}})
#set($expSet = [])
#set($expRemove = [])
#foreach($entry in $util.map.copyAndRemoveAllKeys({args}, {skipped}).entrySet())
  $util.qr($expNames.put("#$entry.key", "$entry.key"))
  #if($util.isNull($entry.value))
    $util.qr($expRemove.add("#$entry.key"))
  #else
    $util.qr($expSet.add("#$entry.key = :$entry.key"))
    $util.qr($expValues.put(":$entry.key", $util.dynamodb.toDynamoDB($entry.value)))
  #end
#end
#if(!$expSet.isEmpty())
  $util.qr($expSet.add("dateAddedToDynamo = if_not_exists(dateAddedToDynamo, :dateAddedToDynamo)"))
  $util.qr($expValues.put(":dateAddedToDynamo", $util.dynamodb.toDynamoDB({NOW})))
#end
#set($expression = "")
#if(!$expSet.isEmpty())
  #set($expression = "SET")
  #foreach($clause in $expSet)
    #set($expression = "$expression $clause")
    #if($foreach.hasNext)
      #set($expression = "$expression,")
    #end
  #end
#end
#if(!$expRemove.isEmpty())
  #set($expression = "$expression REMOVE")
  #foreach($clause in $expRemove)
    #set($expression = "$expression $clause")
    #if($foreach.hasNext)
      #set($expression = "$expression,")
    #end
  #end
#end"""
    document = f"""{{
  "version": "{DYNAMODB_TEMPLATE_VERSION}",
  "operation": "UpdateItem",
  "key": {render(key_block(pk, sk), 1)},
  "update": {{
    "expression": "$expression.trim()"
    #if(!$expNames.isEmpty()), "expressionNames": $util.toJson($expNames)#end
    #if(!$expValues.isEmpty()), "expressionValues": $util.toJson($expValues)#end
  }}
  #if({args}.expectedVersion),
  "condition": {{
    "expression": "version = :expectedVersion",
    "expressionValues": {{
      ":expectedVersion": $util.dynamodb.toDynamoDBJson({args}.expectedVersion)
    }}
  }}
  #end
}}"""
    return template(builder, document)


def batch_get_item(table_name: str, keys_variable: str) -> str:
    """BatchGetItem of the keys held in ``$keys_variable`` (a list of PK/SK maps)."""
    return render(
        {
            "version": DYNAMODB_TEMPLATE_VERSION,
            "operation": "BatchGetItem",
            "tables": {
                table_name: {
                    "keys": Vtl(f"$util.toJson(${keys_variable})"),
                    "consistentRead": True,
                },
            },
        }
    )


def batch_delete_item(table_name: str, keys_variable: str) -> str:
    return render(
        {
            "version": DYNAMODB_TEMPLATE_VERSION,
            "operation": "BatchDeleteItem",
            "tables": {table_name: Vtl(f"$util.toJson(${keys_variable})")},
        }
    )


def connection_response(items: str = "$ctx.result.items", preamble: str = "") -> str:
    """Paginated list response: forwards errors, runs the preamble, then returns items and nextToken."""
    return template(
        RAISE_ON_ERROR,
        preamble,
        render({"items": Vtl(f"$util.toJson({items})"), "nextToken": Vtl(NEXT_TOKEN_RESULT)}),
    )


def first_item_response() -> str:
    """Return the first queried item, or an empty object when nothing matched."""
    return template(
        RAISE_ON_ERROR,
        "#set($result = {})",
        "#if($ctx.result.items.size() > 0)",
        "  #set($result = $ctx.result.items[0])",
        "#end",
        "$util.toJson($result)",
    )
