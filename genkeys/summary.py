import json
from pathlib import Path
from typing import Any, Dict

from eth_utils import keccak, to_hex

from .generator import AUX_ROLES, GenesisKeySet


def to_canonical_json(data: Any) -> str:
	"""Return canonical JSON string for hashing: sorted keys, compact separators."""
	return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def keccak256_json(data: Any) -> str:
	"""Compute keccak256 of the canonical JSON representation and return 0x-prefixed hex."""
	return to_hex(keccak(to_canonical_json(data).encode("utf-8")))


def build_summary(keyset: GenesisKeySet) -> Dict[str, Any]:
	"""Public part of a generated key set. Holds no secret and no derivation path."""
	validators = []
	for v in keyset.validators:
		validators.append({
			"index": v.index,
			"referralId": v.referral_id,
			"keyDir": v.key_dir,
			"validator": v.validator.as_dict(),
			"sessionKeys": {
				role.key_type: dict(key.as_dict(), scheme=role.scheme)
				for role, key in zip(AUX_ROLES, v.aux)
			},
		})
	body = {
		"chain": keyset.chain,
		"keysDir": keyset.keys_dir,
		"validators": validators,
		"root": keyset.root.as_dict() if keyset.root else None,
	}
	return dict(body, keysetHash=keccak256_json(body))


def write_summary(keyset: GenesisKeySet, path: Path) -> Dict[str, Any]:
	summary = build_summary(keyset)
	path.parent.mkdir(parents=True, exist_ok=True)
	with path.open("w", encoding="utf-8") as f:
		json.dump(summary, f, ensure_ascii=False, indent=2)
	return summary
