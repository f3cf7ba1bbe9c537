"""
Local problem bank.

Loads the problem catalog from a plain JSON file or a Fernet-encrypted bank
so hidden test cases are not readable on the exam machine. Offers the same
list_problems/get_problem interface as the remote catalog.
"""

import base64
import os
import json
from pathlib import Path
from typing import List, Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import BankError
from .models import DIFFICULTIES, Problem


SALT_PREFIX = b'SALT'
SALT_LENGTH = 16


def generate_key() -> bytes:
    """New random Fernet key for key-file banks."""
    return Fernet.generate_key()


def derive_key_from_password(password: str, salt: bytes) -> bytes:
    """Derive a Fernet key from a password using PBKDF2."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=480000,  # OWASP recommendation for 2024
    )
    key_material = kdf.derive(password.encode('utf-8'))
    return base64.urlsafe_b64encode(key_material)


def decrypt_bank(encrypted_data: bytes, key_input: str) -> bytes:
    """
    Decrypt bank bytes with a password (SALT-prefixed banks) or a Fernet key.

    Raises:
        BankError: wrong key/password or corrupted data
    """
    if encrypted_data.startswith(SALT_PREFIX):
        start = len(SALT_PREFIX)
        salt = encrypted_data[start:start + SALT_LENGTH]
        encrypted_data = encrypted_data[start + SALT_LENGTH:]
        key = derive_key_from_password(key_input, salt)
    else:
        key = key_input.encode('utf-8')

    try:
        return Fernet(key).decrypt(encrypted_data)
    except (InvalidToken, ValueError) as e:
        raise BankError("Invalid key/password or corrupted bank") from e


def encrypt_bank(plaintext: bytes, key: Optional[bytes] = None, password: Optional[str] = None) -> bytes:
    """
    Encrypt bank bytes with a Fernet key, or with a password-derived key.

    Password-encrypted output is prefixed with SALT + 16-byte salt.
    """
    if password is not None:
        salt = os.urandom(SALT_LENGTH)
        return SALT_PREFIX + salt + Fernet(derive_key_from_password(password, salt)).encrypt(plaintext)
    if key is None:
        raise ValueError("Either a key or a password is required")
    return Fernet(key).encrypt(plaintext)


def validate_bank(bank_data) -> Tuple[List[str], List[str]]:
    """
    Check a bank document against the problem schema.

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    if not isinstance(bank_data, dict) or not isinstance(bank_data.get("questions"), list):
        return ["Missing required list: questions"], warnings

    seen_ids = set()
    for idx, problem in enumerate(bank_data["questions"], start=1):
        label = f"questions[{idx}] ({problem.get('id', '?')})" if isinstance(problem, dict) else f"questions[{idx}]"
        if not isinstance(problem, dict):
            errors.append(f"{label}: must be an object")
            continue

        required_fields = ['id', 'title', 'description', 'difficulty', 'marks', 'testCases', 'starterCode']
        missing = [f for f in required_fields if f not in problem]
        if missing:
            errors.append(f"{label}: Missing fields: {', '.join(missing)}")
            continue

        if problem['id'] in seen_ids:
            errors.append(f"{label}: Duplicate id")
        seen_ids.add(problem['id'])

        if problem['difficulty'] not in DIFFICULTIES:
            errors.append(f"{label}: Invalid difficulty: {problem['difficulty']}")

        if not isinstance(problem['marks'], int) or problem['marks'] <= 0:
            errors.append(f"{label}: marks must be a positive integer")

        test_cases = problem['testCases']
        if not isinstance(test_cases, list) or not test_cases:
            errors.append(f"{label}: No test cases defined")
        else:
            for case_idx, case in enumerate(test_cases, start=1):
                if not isinstance(case, dict) or 'input' not in case or 'expectedOutput' not in case:
                    errors.append(f"{label} test {case_idx}: Missing input/expectedOutput")
            if not any(isinstance(case, dict) and case.get('hidden', case.get('isHidden', False)) for case in test_cases):
                warnings.append(f"{label}: No hidden test cases")

        if not problem['starterCode']:
            warnings.append(f"{label}: No starter code")

        if 'sampleInput' not in problem or 'sampleOutput' not in problem:
            warnings.append(f"{label}: No sample input/output")

    return errors, warnings


def parse_problems(bank_dict) -> List[Problem]:
    """Accept either {"questions": [...]} or a bare list of problems."""
    if isinstance(bank_dict, dict):
        items = bank_dict.get("questions")
    else:
        items = bank_dict
    if not isinstance(items, list):
        raise BankError("Bank has no 'questions' list")
    try:
        return [Problem.from_dict(item) for item in items]
    except (KeyError, TypeError, ValueError) as e:
        raise BankError(f"Malformed problem in bank: {e}") from e


class LocalBank:
    """Problem catalog backed by a bank file."""

    def __init__(self, problems: List[Problem], version: str = ""):
        self.problems = problems
        self.version = version

    @staticmethod
    def load(bank_path: Path, key_input: Optional[str] = None) -> 'LocalBank':
        """
        Load a .json bank directly or decrypt an encrypted one.

        Args:
            bank_path: Path to the bank file
            key_input: Password or Fernet key, not used for .json files
        """
        bank_path = Path(bank_path)
        try:
            if bank_path.suffix.lower() == '.json':
                with open(bank_path, 'r', encoding='utf-8') as f:
                    bank_dict = json.load(f)
            else:
                if not key_input:
                    raise BankError("Encrypted bank requires a key or password")
                with open(bank_path, 'rb') as f:
                    encrypted_data = f.read()
                bank_dict = json.loads(decrypt_bank(encrypted_data, key_input))
        except OSError as e:
            raise BankError(f"Cannot read bank '{bank_path}': {e}") from e
        except json.JSONDecodeError as e:
            raise BankError(f"Invalid JSON in bank: {e}") from e

        version = bank_dict.get("version", "") if isinstance(bank_dict, dict) else ""
        return LocalBank(parse_problems(bank_dict), version=str(version))

    def list_problems(self) -> List[Problem]:
        return list(self.problems)

    def get_problem(self, problem_id: str) -> Problem:
        for problem in self.problems:
            if problem.id == problem_id:
                return problem
        raise KeyError(problem_id)
