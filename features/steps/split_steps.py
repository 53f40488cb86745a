"""
Step definitions for the split filter features
"""

import json

from behave import given, then, when  # type: ignore[import-untyped]

from eventsplit.config import SplitConfig
from eventsplit.exceptions import SplitError
from eventsplit.models import Document
from eventsplit.splitting import SPLIT_INDEX_KEY, Splitter


@given('the split option "{name}" is "{value}"')  # type: ignore[misc]
def step_given_string_option(context, name, value):
    """Set a string split option"""
    context.options[name] = value


@given('the split option "{name}" is true')  # type: ignore[misc]
def step_given_true_option(context, name):
    """Enable a boolean split option"""
    context.options[name] = True


@given("a document:")  # type: ignore[misc]
def step_given_document(context):
    """Create the input document from JSON text"""
    context.document = Document(json.loads(context.text))


@when("the document is split")  # type: ignore[misc]
def step_when_split(context):
    """Run the splitter, keeping any error for later steps"""
    splitter = Splitter(SplitConfig(**context.options))
    try:
        context.result = splitter.process(context.document)
    except SplitError as e:
        context.error = e


@then("{count:d} documents are emitted")  # type: ignore[misc]
def step_then_count(context, count):
    assert len(context.result.emitted) == count, (
        f"Expected {count} documents, got {len(context.result.emitted)}"
    )


@then('the emitted values of "{field}" are:')  # type: ignore[misc]
def step_then_values(context, field):
    expected = [row["value"] for row in context.table]
    actual = [d.get(field) for d in context.result.emitted]
    assert actual == expected, f"Expected {expected}, got {actual}"


@then("the split indices are {indices}")  # type: ignore[misc]
def step_then_indices(context, indices):
    expected = [int(i) for i in indices.split(",")]
    actual = [d.metadata[SPLIT_INDEX_KEY] for d in context.result.emitted]
    assert actual == expected, f"Expected {expected}, got {actual}"


@then("emitted document {number:d} is:")  # type: ignore[misc]
def step_then_document(context, number):
    expected = json.loads(context.text)
    actual = context.result.emitted[number - 1].to_dict()
    assert actual == expected, f"Expected {expected}, got {actual}"


@then("the original document is suppressed")  # type: ignore[misc]
def step_then_suppressed(context):
    assert context.result.suppress_original is True


@then("the original document is not suppressed")  # type: ignore[misc]
def step_then_not_suppressed(context):
    assert context.result.suppress_original is False


@then('the split fails with "{error_name}"')  # type: ignore[misc]
def step_then_error(context, error_name):
    assert hasattr(context, "error"), "Expected the split to fail"
    assert type(context.error).__name__ == error_name, (
        f"Expected {error_name}, got {type(context.error).__name__}"
    )
