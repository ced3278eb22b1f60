"""Tests for genkeys.cli: environment, prompt, exit codes and JSON summary."""

from __future__ import annotations

import io
import json
import subprocess

from genkeys import cli, subkey
from genkeys.config import load_settings
from genkeys.errors import KeyToolError

from conftest import FakeKeyBackend


def _main(argv, environ, backend, stdin=""):
	out, err = io.StringIO(), io.StringIO()
	code = cli.main(argv, environ=environ, backend=backend, stdin=io.StringIO(stdin), stdout=out, stderr=err)
	return code, out.getvalue(), err.getvalue()


class TestSecret:
	def test_missing_secret_exits_before_any_derivation(self, backend):
		code, out, err = _main([], {}, backend, stdin="node\n")
		assert code == 1
		assert backend.calls == []
		assert out == ""
		assert "ERROR: $SECRET unset" in err

	def test_empty_secret_is_missing(self, backend):
		code, _, _ = _main(["--referral-name", "node"], {"SECRET": ""}, backend)
		assert code == 1
		assert backend.calls == []

	def test_secret_from_environment(self, backend):
		code, _, _ = _main(["--referral-name", "node"], {"SECRET": "S"}, backend)
		assert code == 0
		assert backend.calls[-1] == ("inspect", "sr25519", "S")


class TestReferralName:
	def test_prompted_on_stderr_and_read_from_stdin(self, backend):
		code, out, err = _main([], {"SECRET": "S"}, backend, stdin="node\n")
		assert code == 0
		assert cli.REFERRAL_PROMPT in err
		assert cli.REFERRAL_PROMPT not in out
		assert 'b"node1".to_vec(),' in out

	def test_option_skips_prompt(self, backend):
		code, out, err = _main(["--referral-name", "rj"], {"SECRET": "S"}, backend, stdin="ignored\n")
		assert code == 0
		assert cli.REFERRAL_PROMPT not in err
		assert 'b"rj5".to_vec(),' in out

	def test_eof_on_stdin_aborts(self, backend):
		code, _, err = _main([], {"SECRET": "S"}, backend, stdin="")
		assert code == 1
		assert "referral_name" in err
		assert backend.calls == []


class TestRun:
	def test_options_reach_backend(self, backend):
		code, out, _ = _main(
			["--referral-name", "node", "--chain", "malan", "--keys-dir", "k"],
			{"SECRET": "S"},
			backend,
		)
		assert code == 0
		assert ("insert", "gran", "ed25519", "malan", "k/node1", "S//grandpa//1") in backend.calls
		assert out.rstrip().endswith("The generated keys are in directory k")

	def test_key_tool_failure_exits_non_zero(self):
		backend = FakeKeyBackend(fail_on="S//babe//1", error=KeyToolError("key insert exited with status 1: bad"))
		code, _, err = _main(["--referral-name", "node"], {"SECRET": "S"}, backend)
		assert code == 1
		assert "ERROR: key insert exited with status 1: bad" in err
		assert len(backend.inserts()) == 1

	def test_json_summary(self, backend, tmp_path):
		path = tmp_path / "out" / "keys.json"
		code, _, _ = _main(["--referral-name", "node", "--json-out", str(path)], {"SECRET": "hunter2"}, backend)
		assert code == 0
		text = path.read_text(encoding="utf-8")
		assert "hunter2" not in text
		data = json.loads(text)
		assert data["validators"][0]["referralId"] == "node1"
		assert data["keysetHash"].startswith("0x")


class TestSettings:
	def test_repr_hides_secret(self):
		args = cli.build_parser().parse_args(["--json-out", "out/keys.json"])
		settings = load_settings(args, {"SECRET": "hunter2"})
		assert settings.secret == "hunter2"
		assert settings.json_out.name == "keys.json"
		assert "hunter2" not in repr(settings)


class TestReferralWhitespace:
	def test_surrounding_whitespace_is_trimmed(self, backend):
		code, out, _ = _main([], {"SECRET": "S"}, backend, stdin="  node \n")
		assert code == 0
		assert 'b"node1".to_vec(),' in out
		assert ("insert", "gran", "ed25519", "mainnet", "keys/node1", "S//grandpa//1") in backend.calls


class TestSubprocessBackendWiring:
	PUBKEY = "0x" + "d4" * 32
	ADDRESS = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"

	def _respond(self, commands):
		def run(cmd, **kwargs):
			commands.append(list(cmd))
			if cmd[2] == "insert":
				return subprocess.CompletedProcess(cmd, 0, "", "")
			text = f"Secret Key URI `<suri>` is account:\n  Public key (hex):  {self.PUBKEY}\n  SS58 Address:      {self.ADDRESS}\n"
			return subprocess.CompletedProcess(cmd, 0, text, "")
		return run

	def test_options_reach_key_tool(self, monkeypatch):
		commands: list[list[str]] = []
		monkeypatch.setattr(subkey.subprocess, "run", self._respond(commands))
		code, out, err = _main(
			["--referral-name", "node", "--binary", "/opt/chainx", "--network", "chainx", "--output-type", "text"],
			{"SECRET": "S"},
			None,
		)
		assert code == 0, err
		assert len(commands) == 5 * (1 + 2 * 4) + 1
		assert all(c[0] == "/opt/chainx" for c in commands)
		inspects = [c for c in commands if c[2] == "inspect"]
		assert all(c[c.index("--network") + 1] == "chainx" for c in inspects)
		assert not any("--output-type" in c for c in inspects)
		assert inspects[-1][-1] == "S"
		assert f'hex!["{"d4" * 32}"].into(),' in out
