"""Shared fixtures and model classes for graphguard tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

import pytest

from graphguard import CompositeFieldValidator, ValidatorRegistry
from graphguard.rules import Format, Length, NotBlank, Range


@dataclass
class Address:
    """Test address class."""
    street: str
    zip: str


@dataclass
class Tag:
    """Test tag class, deliberately without a validator."""
    label: str
    owner: Optional[Any] = None


@dataclass
class Person:
    """Test person class."""
    name: Optional[str]
    email: str
    age: int
    address: Optional[Address] = None
    tag: Optional[Tag] = None
    friends: List["Person"] = field(default_factory=list)


class Node:
    """Linked node used to build deep or cyclic graphs."""

    def __init__(self, name: str, child: Optional["Node"] = None):
        self.name = name
        self.child = child


def make_chain(length: int) -> Node:
    """Build a chain of ``length`` nested nodes and return its head."""
    head = None
    for index in reversed(range(length)):
        head = Node(f"n{index}", head)
    return head


@pytest.fixture
def address_validator():
    """Validator requiring a five character zip code."""
    return CompositeFieldValidator().field("zip").validates(Length, Length.exact(5)).end()


@pytest.fixture
def person_validator():
    """Validator for person name, email and age."""
    return (
        CompositeFieldValidator()
        .field("name").validates(NotBlank)
        .field("email").validates(Format, Format.pattern(r"^[^@\s]+@[^@\s]+$"))
        .field("age").validates(Range, Range.between(18, 120))
        .end()
    )


@pytest.fixture
def registry(address_validator, person_validator):
    """Registry with person and address validators."""
    return ValidatorRegistry().register(Person, person_validator).register(Address, address_validator)


@pytest.fixture
def valid_person():
    """A person passing every fixture validator."""
    return Person(
        name="Alice",
        email="alice@example.com",
        age=30,
        address=Address(street="Main Street 1", zip="12345"),
    )
