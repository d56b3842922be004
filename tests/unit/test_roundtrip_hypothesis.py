from __future__ import annotations

from hypothesis import given, settings
import hypothesis.strategies as st

from recordmap.catalog import FieldCatalog
from recordmap.converter import Converter
from tests.utils.records import Account, AddressModel, AddressRecord, Person, Trunk, Branch, Leaf

_converter = Converter(catalog=FieldCatalog())

_ints = st.integers(min_value=-(2**63), max_value=2**63 - 1)

_people = st.builds(
    Person,
    Name=st.text(max_size=12),
    Age=_ints,
    Address=st.builds(AddressRecord, City=st.text(max_size=12), Zip=_ints),
    Nick=st.text(max_size=12),
)


# Record -> map -> fresh record must reproduce every field
@given(_people)
@settings(max_examples=60, deadline=None)
def test_dataclass_round_trip(person: Person):
    mapping, ok = _converter.record_to_map(person)
    assert ok

    fresh = Person()
    report = _converter.map_to_record(mapping, fresh)

    assert fresh == person
    assert report.complete


@given(_ints)
@settings(max_examples=30, deadline=None)
def test_deeply_nested_round_trip(value: int):
    trunk = Trunk(A=Branch(B=Leaf(C=value)))
    mapping, _ = _converter.record_to_map(trunk)

    fresh = Trunk()
    _converter.map_to_record(mapping, fresh)

    assert fresh == trunk


@given(
    st.builds(
        Account,
        id=_ints,
        owner=st.text(max_size=12),
        address=st.builds(AddressModel, city=st.text(max_size=12), zip_code=_ints),
    )
)
@settings(max_examples=40, deadline=None)
def test_pydantic_round_trip(account: Account):
    mapping, ok = _converter.record_to_map(account)
    assert ok

    fresh = Account()
    _converter.map_to_record(mapping, fresh)

    assert fresh == account
