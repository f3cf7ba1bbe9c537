#!/usr/bin/env python3
"""
build_bank.py - Validate and encrypt a plaintext JSON problem bank.

Usage with a new key (written next to the bank, hand it to learners at exam time):
    python tools/build_bank.py --in problems.json --out banks/exam1.enc --new-key EXAM1.key

Usage with an existing key file:
    python tools/build_bank.py --in problems.json --out banks/exam1.enc --key-file EXAM1.key

Usage with password:
    python tools/build_bank.py --in problems.json --out banks/exam1.enc --password
"""

import argparse
import getpass
import hashlib
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from codeexam.bank import encrypt_bank, generate_key, validate_bank


def read_password() -> str:
    password = getpass.getpass("Enter encryption password: ")
    password_confirm = getpass.getpass("Confirm password: ")

    if password != password_confirm:
        print("[ERROR] Passwords do not match", file=sys.stderr)
        sys.exit(1)

    if len(password) < 8:
        print("[ERROR] Password must be at least 8 characters", file=sys.stderr)
        sys.exit(1)

    return password


def write_new_key(key_path: str) -> bytes:
    """Generate a Fernet key and save it, refusing to overwrite an existing key."""
    path = Path(key_path)
    if path.exists():
        print(f"[ERROR] Key file already exists: {path}", file=sys.stderr)
        sys.exit(1)

    key = generate_key()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(key)

    print(f"[OK] New key written to {path}")
    print(f"  [!] Store it securely and never commit it to version control")
    return key


def build_bank(in_file: str, out_file: str, key_file: str = None,
               new_key_file: str = None, use_password: bool = False) -> None:
    """Validate a plaintext JSON problem bank and encrypt it."""
    try:
        with open(in_file, 'rb') as f:
            plaintext = f.read()

        # Refuse to encrypt a bank the client could not load
        try:
            bank_data = json.loads(plaintext)
        except json.JSONDecodeError as e:
            print(f"[ERROR] Invalid JSON in input file: {e}", file=sys.stderr)
            sys.exit(1)

        errors, warnings = validate_bank(bank_data)
        if errors:
            for err in errors:
                print(f"[ERROR] {err}", file=sys.stderr)
            sys.exit(1)

        questions = bank_data['questions']
        print(f"[OK] Input JSON validated")
        print(f"  Version: {bank_data.get('version', 'unknown')}")
        print(f"  Problems: {len(questions)} ({sum(q['marks'] for q in questions)} marks)")
        for warn in warnings:
            print(f"  [WARNING] {warn}")

        password = None
        key = None
        if use_password:
            password = read_password()
            method = "Password-based"
        elif new_key_file:
            key = write_new_key(new_key_file)
            method = f"New key file ({new_key_file})"
        else:
            with open(key_file, 'rb') as f:
                key = f.read().strip()
            method = f"Key file ({key_file})"

        final_data = encrypt_bank(plaintext, key=key, password=password)
        sha256_hash = hashlib.sha256(final_data).hexdigest()

        Path(out_file).parent.mkdir(parents=True, exist_ok=True)
        with open(out_file, 'wb') as f:
            f.write(final_data)

        print(f"\n[OK] Success: Bank encrypted")
        print(f"  Input: {in_file} ({len(plaintext)} bytes)")
        print(f"  Output: {out_file} ({len(final_data)} bytes)")
        print(f"  Method: {method}")
        print(f"  SHA256: {sha256_hash}")

    except FileNotFoundError as e:
        print(f"[ERROR] File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"[ERROR] Error encrypting bank: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        description="Validate and encrypt a plaintext JSON problem bank.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/build_bank.py --in problems.json --out banks/exam1.enc --new-key EXAM1.key
  python tools/build_bank.py --in problems.json --out banks/exam1.enc --key-file EXAM1.key
  python tools/build_bank.py --in problems.json --out banks/exam1.enc --password

Notes:
  - Input file must be a valid problem bank ({"version": ..., "questions": [...]})
  - Output directory will be created if it doesn't exist
  - Produces SHA256 checksum for verification
        """
    )
    parser.add_argument(
        "--in",
        dest="in_file",
        required=True,
        help="Input plaintext JSON file"
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output encrypted bank file (.enc)"
    )
    key_group = parser.add_mutually_exclusive_group(required=True)
    key_group.add_argument(
        "--key-file",
        help="Existing file containing the encryption key"
    )
    key_group.add_argument(
        "--new-key",
        metavar="KEY_FILE",
        help="Generate a new encryption key and save it to KEY_FILE"
    )
    key_group.add_argument(
        "--password",
        action="store_true",
        help="Use password-based encryption instead of a key file"
    )

    args = parser.parse_args()
    build_bank(args.in_file, args.out, args.key_file, args.new_key, args.password)


if __name__ == "__main__":
    main()
