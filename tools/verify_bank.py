#!/usr/bin/env python3
"""
verify_bank.py - Validate a problem bank and decrypt it for inspection.

Usage with key file:
    python tools/verify_bank.py --bank banks/exam1.enc --key-file EXAM1.key

Usage with password:
    python tools/verify_bank.py --bank banks/exam1.enc --password

Usage with plaintext:
    python tools/verify_bank.py --bank problems.json
"""

import argparse
import getpass
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from codeexam.bank import SALT_PREFIX, decrypt_bank, validate_bank
from codeexam.errors import BankError


def verify_bank(bank_file: str, key_file: str = None, use_password: bool = False, verbose: bool = False) -> bool:
    """
    Verify a problem bank (encrypted or plaintext).
    Returns True if valid, False otherwise.
    """
    try:
        with open(bank_file, 'rb') as f:
            data = f.read()

        if bank_file.endswith('.enc'):
            if data.startswith(SALT_PREFIX):
                if not use_password:
                    print("[ERROR] This bank was encrypted with a password. Use --password flag.", file=sys.stderr)
                    return False
                key_input = getpass.getpass("Enter decryption password: ")
                print(f"[OK] Using password-based decryption")
            else:
                if not key_file:
                    print("[ERROR] This bank was encrypted with a key file. Use --key-file.", file=sys.stderr)
                    return False
                with open(key_file, 'r', encoding='utf-8') as f:
                    key_input = f.read().strip()
                print(f"[OK] Using key file decryption")

            data = decrypt_bank(data, key_input)
            print(f"[OK] Bank decrypted successfully")

        try:
            bank_data = json.loads(data)
        except json.JSONDecodeError as e:
            print(f"[ERROR] Invalid JSON: {e}", file=sys.stderr)
            return False

        print(f"\n[SCHEMA] Bank Schema Validation")
        print(f"{'='*60}")

        errors, warnings = validate_bank(bank_data)

        if not errors:
            questions = bank_data['questions']
            print(f"[OK] Version: {bank_data.get('version', 'unknown')}")
            print(f"[OK] Problems: {len(questions)}")
            if verbose:
                for problem in questions:
                    hidden = sum(1 for tc in problem['testCases'] if tc.get('hidden', tc.get('isHidden', False)))
                    print(f"  [OK] {problem['id']}: {problem['title']} "
                          f"({problem['difficulty']}, {problem['marks']} marks, "
                          f"{len(problem['testCases'])} tests, {hidden} hidden)")

        if warnings:
            print(f"\n[WARNING] ({len(warnings)}):")
            for warn in warnings[:10]:  # Limit output
                print(f"  - {warn}")
            if len(warnings) > 10:
                print(f"  ... and {len(warnings) - 10} more")

        if errors:
            print(f"\n[ERROR] ({len(errors)}):")
            for err in errors[:20]:  # Limit output
                print(f"  - {err}")
            if len(errors) > 20:
                print(f"  ... and {len(errors) - 20} more")
            return False

        print(f"\n[OK] Bank validation PASSED")
        return True

    except FileNotFoundError as e:
        print(f"[ERROR] File not found: {e}", file=sys.stderr)
        return False
    except BankError as e:
        print(f"[ERROR] Decryption failed: {e}", file=sys.stderr)
        return False


def main():
    parser = argparse.ArgumentParser(
        description="Validate problem bank schema and content.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Verify encrypted bank
  python tools/verify_bank.py --bank banks/exam1.enc --key-file EXAM1.key

  # Verify plaintext bank (during authoring)
  python tools/verify_bank.py --bank problems.json

  # Verbose output
  python tools/verify_bank.py --bank problems.json --verbose
        """
    )
    parser.add_argument(
        "--bank",
        required=True,
        help="Path to bank file (.enc or .json)"
    )
    parser.add_argument(
        "--key-file",
        help="Encryption key file (for key-file encrypted banks)"
    )
    parser.add_argument(
        "--password",
        action="store_true",
        help="Use password to decrypt (for password-encrypted banks)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed problem information"
    )

    args = parser.parse_args()

    success = verify_bank(args.bank, args.key_file, args.password, args.verbose)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
