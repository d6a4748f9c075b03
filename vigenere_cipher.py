import string

ALPHABET = string.ascii_lowercase


def clean_key(key: str):
    """Lower-cased key, or None when it is empty or holds a non-letter."""
    k = key.lower()
    if not k or any(ch not in ALPHABET for ch in k):
        return None
    return k


def _shift(text: str, key: str, sign: int):
    k = clean_key(key)
    if k is None:
        return None
    out = []
    i = 0
    for ch in text:
        low = ch.lower()
        if low not in ALPHABET:
            out.append(ch)          # punctuation/spaces pass through, key does not advance
            continue
        shift = ALPHABET.index(k[i % len(k)]) * sign
        new = ALPHABET[(ALPHABET.index(low) + shift) % 26]
        out.append(new.upper() if ch.isupper() else new)
        i += 1
    return ''.join(out)


def encrypt(text: str, key: str):
    return _shift(text, key, 1)


def decrypt(text: str, key: str):
    """
    Vigenère decryption of text with a repeating key ('a' = shift 0).
    Returns None if the key is not a non-empty run of letters.
    """
    return _shift(text, key, -1)
