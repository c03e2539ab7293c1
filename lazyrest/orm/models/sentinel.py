class _Missing:
    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


# distinguishes "no stored value" from a stored None
MISSING = _Missing()
