"""Tests for outline extraction."""

from __future__ import annotations

from lume.models import OutlineItem
from lume.outline import extract_outline

DOCUMENT = r"""\documentclass{article}
\begin{document}
\section{The Vision}
\label{sec:vision}
Some text.
\subsection{Completed (Implemented)}
\subsubsection*{Phase 1: The Forge}
% \section{Commented out}
\section[Short]{Features \& Progress}
Costs 50\% less. \section{After escaped percent}
\subsection{Tech \textbf{Stack}}
\end{document}
"""


def test_headings_and_labels_in_order() -> None:
    assert extract_outline(DOCUMENT) == [
        OutlineItem(title="The Vision", level=1, line=3),
        OutlineItem(title="sec:vision", level=4, line=4),
        OutlineItem(title="Completed (Implemented)", level=2, line=6),
        OutlineItem(title="Phase 1: The Forge", level=3, line=7),
        OutlineItem(title=r"Features \& Progress", level=1, line=9),
        OutlineItem(title="After escaped percent", level=1, line=10),
        OutlineItem(title=r"Tech \textbf{Stack}", level=2, line=11),
    ]


def test_empty_document() -> None:
    assert extract_outline("") == []
    assert extract_outline("Just prose, no structure.") == []


def test_multiple_markers_on_one_line() -> None:
    items = extract_outline(r"\section{A}\label{a} \subsection{B}")
    assert [(i.title, i.level, i.line) for i in items] == [("A", 1, 1), ("a", 4, 1), ("B", 2, 1)]
