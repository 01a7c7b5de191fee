"""Text tokens for listing lines.

Each token knows its plain text; tokens with a style are colored when the
listing is rendered with colors enabled.
"""

from typing import List, Optional

from termcolor import colored


class Token:
    style: Optional[str] = None
    attrs: tuple = ()

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return self.__dict__ == getattr(other, "__dict__", {})

    def styled(self) -> str:
        text = str(self)
        if self.style is None or not text:
            return text
        return colored(text, self.style, attrs=list(self.attrs), force_color=True)


def asm_str(parts: List[Token], colors: bool = False) -> str:
    if colors:
        return "".join(part.styled() for part in parts)
    return "".join(str(part) for part in parts)


class TInstr(Token):
    def __init__(self, instr: str) -> None:
        self.instr = instr

    def __repr__(self) -> str:
        return f"TInstr({self.instr})"

    def __str__(self) -> str:
        return self.instr


class TSep(Token):
    def __init__(self, sep: str) -> None:
        self.sep = sep

    def __repr__(self) -> str:
        return f"TSep({self.sep})"

    def __str__(self) -> str:
        return self.sep


class TText(Token):
    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"TText({self.text})"

    def __str__(self) -> str:
        return self.text


class TInt(Token):
    def __init__(self, value: str) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"TInt({self.value})"

    def __str__(self) -> str:
        return str(self.value)


class TReg(Token):
    def __init__(self, reg: str) -> None:
        self.reg = reg

    def __repr__(self) -> str:
        return f"TReg({self.reg})"

    def __str__(self) -> str:
        return self.reg


class TLabel(Token):
    """Label definition or reference (``l03``, ``f01``, ``CP_ME_INIT``)."""

    style = "magenta"

    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return f"TLabel({self.label})"

    def __str__(self) -> str:
        return self.label


class TErr(Token):
    """Raw bits or fields the decoder could not account for."""

    style = "red"
    attrs = ("bold",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"TErr({self.text})"

    def __str__(self) -> str:
        return self.text


class TComment(Token):
    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"TComment({self.text})"

    def __str__(self) -> str:
        return self.text
