"""
权限位类
"""

_RWX = "rwx"


class FsPermission:
    """文件权限位，只保留低9位的 user/group/other 权限"""

    DEFAULT_MODE = 0o777

    def __init__(self, mode: int = DEFAULT_MODE):
        """
        初始化权限

        Args:
            mode: 八进制权限位，例如 0o755
        """
        self.mode: int = mode & 0o777

    @classmethod
    def get_default(cls) -> 'FsPermission':
        """默认权限 0o777"""
        return cls(cls.DEFAULT_MODE)

    @classmethod
    def from_short(cls, mode: int) -> 'FsPermission':
        return cls(mode)

    def to_short(self) -> int:
        return self.mode

    def __str__(self):
        chars = []
        for shift in (6, 3, 0):
            bits = (self.mode >> shift) & 0o7
            for i, flag in enumerate(_RWX):
                chars.append(flag if bits & (0o4 >> i) else "-")
        return "".join(chars)

    def __repr__(self):
        return f"FsPermission({oct(self.mode)})"

    def __eq__(self, other):
        if not isinstance(other, FsPermission):
            return NotImplemented
        return self.mode == other.mode

    def __hash__(self):
        return hash(self.mode)
