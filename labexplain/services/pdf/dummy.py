"""더미 PDF 텍스트 소스 구현 (테스트용)"""

from typing import Iterator, Optional, Sequence

from labexplain.models.fragments import PageBreak, ParseEvent, TextFragment

from .base import BasePdfTextSource


def _default_events() -> list[ParseEvent]:
    """간단한 한 페이지짜리 검사결과지 이벤트"""
    rows = [
        (2.0, 3.0, "Hématologie"),
        (2.0, 4.0, "Leucocytes"),
        (9.0, 4.02, "4,15 Giga/L"),
        (14.0, 3.98, "(repères : 4,05 à 11,00)"),
        (2.0, 5.0, "Polynucléaires neutrophiles"),
        (9.0, 5.0, "1,15 Giga/L"),
        (14.0, 5.0, "(repères : 1,50 à 7,50)"),
    ]
    events: list[ParseEvent] = [PageBreak(page_index=0)]
    events.extend(TextFragment(x=x, y=y, content=c, page_index=0) for x, y, c in rows)
    return events


class DummyPdfTextSource(BasePdfTextSource):
    """테스트용 더미 PDF 텍스트 소스

    입력 바이트와 관계없이 고정된 이벤트 리스트를 재생합니다.
    fail_after 가 주어지면 그 개수만큼 내보낸 뒤 RuntimeError 를 발생시킵니다.
    """

    def __init__(self, events: Optional[Sequence[ParseEvent]] = None, fail_after: Optional[int] = None):
        self.events = list(events) if events is not None else _default_events()
        self.fail_after = fail_after

    def iter_events(self, pdf_bytes: bytes) -> Iterator[ParseEvent]:
        for i, event in enumerate(self.events):
            if self.fail_after is not None and i >= self.fail_after:
                raise RuntimeError("dummy PDF source failure")
            yield event
        if self.fail_after is not None and self.fail_after >= len(self.events):
            raise RuntimeError("dummy PDF source failure")
