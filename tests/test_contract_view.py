from __future__ import annotations

import copy
import pickle

import pytest

from delegate_kit.contracts import ContractView, contract_spec, restrict
from delegate_kit.contracts.view import contract_of, unwrap
from delegate_kit.errors import ReadOnlyMemberError
from delegate_kit.output import RecordingSink
from delegate_kit.samples import (
    CountingHandler,
    EchoHandler,
    Handler,
    Labeled,
    LabeledHandler,
    RefusingHandler,
    Tallied,
)


def _echo(sink: RecordingSink) -> object:
    return EchoHandler(label="e", sink=sink)


def _counting(sink: RecordingSink) -> object:
    return CountingHandler("c", sink, limit=3)


def _refusing(sink: RecordingSink) -> object:
    return RefusingHandler(label="r", sink=sink)


CASES = [
    (_echo, Handler),
    (_echo, Labeled),
    (_echo, LabeledHandler),
    (_counting, Handler),
    (_counting, Labeled),
    (_counting, Tallied),
    (_counting, LabeledHandler),
    (_refusing, Handler),
    (_refusing, LabeledHandler),
]


@pytest.mark.parametrize(
    ("make", "contract"),
    CASES,
    ids=[f"{make.__name__[1:]}-{contract.__name__}" for make, contract in CASES],
)
def test_view_exposes_exactly_contract_members(make, contract, sink: RecordingSink) -> None:  # noqa: ANN001
    target = make(sink)
    spec = contract_spec(contract)
    view = restrict(target, contract)

    for name in spec.member_names:
        assert getattr(view, name) is not None

    extras = [n for n in dir(target) if not n.startswith("_") and n not in spec]
    assert extras, "every sample conformer has members beyond the contract"
    for name in extras:
        assert hasattr(target, name)
        with pytest.raises(AttributeError):
            getattr(view, name)

    assert dir(view) == sorted(spec.member_names)


def test_extra_member_only_reachable_through_concrete_type(sink: RecordingSink) -> None:
    echo = EchoHandler(label="hi", sink=sink)
    view = restrict(echo, Handler)

    assert echo.shout() == "HI"
    with pytest.raises(AttributeError, match="shout"):
        view.shout()


def test_read_only_property_rejects_write_even_if_storage_is_mutable(sink: RecordingSink) -> None:
    counting = CountingHandler("before", sink)
    view = restrict(counting, Labeled)

    with pytest.raises(ReadOnlyMemberError) as ei:
        view.label = "after"

    assert isinstance(ei.value, AttributeError)
    assert ei.value.member == "label"
    assert counting.label == "before"

    counting.label = "after"
    assert view.label == "after"


def test_read_write_property_writes_through(sink: RecordingSink) -> None:
    counting = CountingHandler("c", sink)
    view = restrict(counting, Tallied)

    view.tally = 5

    assert counting.tally == 5
    assert view.tally == 5


def test_methods_and_unknown_names_are_not_assignable(sink: RecordingSink) -> None:
    view = restrict(CountingHandler("c", sink), LabeledHandler)

    with pytest.raises(ReadOnlyMemberError):
        view.handle = lambda: False

    with pytest.raises(AttributeError) as ei:
        view.limit = 10
    assert not isinstance(ei.value, ReadOnlyMemberError)

    with pytest.raises(ReadOnlyMemberError):
        del view.label


def test_calls_reach_the_target(sink: RecordingSink) -> None:
    view = restrict(EchoHandler(label="x", sink=sink), LabeledHandler)

    assert view.handle() is True
    assert sink.lines == ["echo: x"]


def test_view_over_several_contracts(sink: RecordingSink) -> None:
    counting = CountingHandler("c", sink)
    view = ContractView(counting, Labeled, Tallied)

    assert dir(view) == ["label", "tally"]
    assert contract_of(view).name == "LabeledAndTallied"
    with pytest.raises(AttributeError):
        view.handle()


def test_unwrap(sink: RecordingSink) -> None:
    echo = EchoHandler(label="x", sink=sink)

    assert unwrap(restrict(echo, Handler)) is echo
    assert unwrap(echo) is echo


def test_copies_share_the_target_and_keep_the_contract(sink: RecordingSink) -> None:
    counting = CountingHandler("c", sink)
    view = restrict(counting, Labeled)

    shallow = copy.copy(view)
    deep = copy.deepcopy(view)

    assert unwrap(shallow) is counting
    assert unwrap(deep) is not counting
    for clone in (shallow, deep):
        assert clone.label == "c"
        assert dir(clone) == ["label"]
        with pytest.raises(ReadOnlyMemberError):
            clone.label = "x"


def test_pickled_view_keeps_the_contract() -> None:
    view = restrict(CountingHandler("c", RecordingSink()), Labeled, Tallied)

    restored = pickle.loads(pickle.dumps(view))

    assert restored.label == "c"
    assert dir(restored) == ["label", "tally"]
    with pytest.raises(AttributeError):
        restored.handle()


def test_repeated_contract_in_view(sink: RecordingSink) -> None:
    view = ContractView(EchoHandler(label="x", sink=sink), Labeled, Labeled)

    assert view.label == "x"
    assert dir(view) == ["label"]


def test_view_over_view_only_narrows(sink: RecordingSink) -> None:
    echo = EchoHandler(label="x", sink=sink)
    outer = restrict(restrict(echo, Labeled), LabeledHandler)

    assert outer.label == "x"
    with pytest.raises(AttributeError):
        outer.handle()
    assert unwrap(outer) is echo
