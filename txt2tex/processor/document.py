"""LaTeX document emission."""

from dataclasses import dataclass
from typing import TextIO

from txt2tex.processor.escaping import escape_latex

PARAGRAPH_BREAK = "\n\n"
LINE_BREAK = "\\\\\n"


@dataclass
class DocumentStyle:
    """Preamble settings for the generated document."""

    paper: str = "a4paper"
    font_size: str = "11pt"
    margin: str = "25mm"
    main_font: str = "Latin Modern Roman"
    # "Noto Color Emoji" on Linux
    emoji_font: str = "Segoe UI Emoji"

    def preamble(self) -> str:
        """Document preamble up to and including \\begin{document}.

        Requires lualatex (fontspec).
        """
        return (
            f"\\documentclass[{self.paper},{self.font_size}]{{article}}\n"
            f"\\usepackage[margin={self.margin}]{{geometry}}\n"
            "\\usepackage{graphicx}\n"
            "\\usepackage{fontspec}\n"
            f"\\setmainfont{{{self.main_font}}}\n"
            f"\\newfontfamily\\emojifont{{{self.emoji_font}}}\n"
            "\\DeclareTextFontCommand{\\emoji}{\\emojifont}\n"
            "\\setlength{\\emergencystretch}{3em}\n"
            "\\begin{document}\n\n"
        )

    @staticmethod
    def closing() -> str:
        """Closing marker of the document."""
        return "\n\\end{document}\n"


def image_fragment(relative_path: str) -> str:
    """Embed an image scaled to the text block."""
    return (
        "\n\\par\\noindent\n"
        "\\includegraphics[width=\\linewidth,height=0.9\\textheight,keepaspectratio]"
        f"{{\\detokenize{{{relative_path}}}}}\n"
        "\\par\\medskip\n\n"
    )


def attachment_fragment(relative_path: str) -> str:
    """Reference a non-image attachment by path."""
    return (
        "\n\\begin{quote}\n"
        f"\\textbf{{Attachment:}} \\detokenize{{{relative_path}}}\n"
        "\\end{quote}\n\n"
    )


def unmatched_fragment(line: str) -> str:
    """Placeholder quoting an attachment line that matched no file."""
    return (
        "\n\\begin{quote}\n"
        "\\textbf{Unmatched attachment placeholder:} "
        f"{escape_latex(line)}"
        "\\end{quote}\n\n"
    )


def text_fragment(line: str) -> str:
    """Escaped text followed by a forced line break."""
    return escape_latex(line) + LINE_BREAK


class LatexDocument:
    """Writes a LaTeX document to a text stream fragment by fragment."""

    def __init__(self, stream: TextIO, style: DocumentStyle | None = None) -> None:
        """Initialize document.

        Args:
            stream: Output stream, opened for text writing.
            style: Preamble settings.
        """
        self.stream = stream
        self.style = style or DocumentStyle()

    def begin(self) -> None:
        """Write the preamble."""
        self.stream.write(self.style.preamble())

    def end(self) -> None:
        """Write the closing marker."""
        self.stream.write(self.style.closing())

    def write_image(self, relative_path: str) -> None:
        self.stream.write(image_fragment(relative_path))

    def write_attachment(self, relative_path: str) -> None:
        self.stream.write(attachment_fragment(relative_path))

    def write_unmatched(self, line: str) -> None:
        self.stream.write(unmatched_fragment(line))

    def write_paragraph_break(self) -> None:
        self.stream.write(PARAGRAPH_BREAK)

    def write_text(self, line: str) -> None:
        self.stream.write(text_fragment(line))
