"""Shared fixtures: a recording stand-in for the node's key tool."""

from __future__ import annotations

import pytest
from eth_utils import keccak, to_hex

from genkeys.subkey import KeyBackend, KeyInfo


def fake_key(scheme: str, suri: str) -> KeyInfo:
	digest = to_hex(keccak(text=f"{scheme}:{suri}"))
	return KeyInfo(address="5" + digest[2:47], public_key=digest)


class FakeKeyBackend(KeyBackend):
	def __init__(self, fail_on: str | None = None, error: Exception | None = None):
		self.calls: list[tuple] = []
		self.fail_on = fail_on
		self.error = error

	def _maybe_fail(self, suri: str) -> None:
		if self.fail_on is not None and suri == self.fail_on:
			raise self.error

	def inspect_key(self, scheme, suri):
		self.calls.append(("inspect", scheme, suri))
		self._maybe_fail(suri)
		return fake_key(scheme, suri)

	def insert_key(self, key_type, scheme, chain, base_path, suri):
		self.calls.append(("insert", key_type, scheme, chain, base_path, suri))
		self._maybe_fail(suri)
		return fake_key(scheme, suri)

	def inserts(self) -> list[tuple]:
		return [c for c in self.calls if c[0] == "insert"]

	def inspects(self) -> list[tuple]:
		return [c for c in self.calls if c[0] == "inspect"]


@pytest.fixture
def backend() -> FakeKeyBackend:
	return FakeKeyBackend()
