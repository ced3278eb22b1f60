"""Rust literal fragments for the genesis `initial_authorities` and root key."""

from typing import List, Sequence

from .subkey import KeyInfo


SECRET_PLACEHOLDER = "SECRET"

TUPLE_INDENT = 8
KEY_INDENT = 12
FIELD_INDENT = 16


def _pad(indent: int, text: str) -> str:
	return " " * indent + text


def address_comment(address: str, indent: int = KEY_INDENT) -> str:
	return _pad(indent, f"// {address}")


def hex_literal(key: KeyInfo, conversion: str = "into", indent: int = KEY_INDENT) -> str:
	"""`hex!["<pubkey>"].<conversion>(),` with the 0x prefix dropped."""
	return _pad(indent, f'hex!["{key.public_key_hex}"].{conversion}(),')


def bytes_literal(value: str, indent: int = FIELD_INDENT) -> str:
	return _pad(indent, f'b"{value}".to_vec(),')


def derivation_path(secret: str, role: str, index: int) -> str:
	return f"{secret}//{role}//{index}"


def validator_header(index: int, validator_role: str, aux_roles: Sequence[str]) -> List[str]:
	"""Lines naming the paths used for one validator, with the secret left out."""
	aux = ", ".join(derivation_path(SECRET_PLACEHOLDER, role, index) for role in aux_roles)
	return [
		f"{derivation_path(SECRET_PLACEHOLDER, validator_role, index)}:",
		aux,
		"",
	]


def authority_tuple(validator: KeyInfo, referral_id: str, aux_keys: Sequence[KeyInfo]) -> List[str]:
	"""One `AuthorityKeysTuple`: ((validator, referral), babe, grandpa, im_online, authority_discovery)."""
	lines = [
		_pad(TUPLE_INDENT, "("),
		_pad(KEY_INDENT, "("),
		address_comment(validator.address, FIELD_INDENT),
		hex_literal(validator, "into", FIELD_INDENT),
		bytes_literal(referral_id),
		_pad(KEY_INDENT, "),"),
	]
	for key in aux_keys:
		lines.append(address_comment(key.address))
		lines.append(hex_literal(key, "unchecked_into"))
	lines.append(_pad(TUPLE_INDENT, "),"))
	return lines


def root_block(root: KeyInfo) -> List[str]:
	return [
		"Root:",
		address_comment(root.address),
		hex_literal(root, "into"),
	]
