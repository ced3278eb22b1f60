# Generate the genesis validator keys and root key from $SECRET.
#
#   export SECRET="YOUR SECRET"
#   python scripts/gen_keys.py --binary ../../target/release/chainx
#
# The snippets printed to stdout are meant to be pasted into chain_spec.rs.

import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from genkeys.cli import main


if __name__ == "__main__":
	sys.exit(main())
