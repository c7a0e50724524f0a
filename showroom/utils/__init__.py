import string
import random


def random_string(length: int = 16, alphabet: str = string.ascii_lowercase + string.digits) -> str:
    return ''.join(random.choices(alphabet, k=length))
