from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Union
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4, portrait
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Image, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from moral_tales.errors import ExportError
from moral_tales.model.story import StoryPart

DEFAULT_TITLE = "My Awesome Story"
PDF_FILE_NAME = "my-storybook.pdf"

TITLE_COLOR = colors.HexColor("#0D9488")
TEXT_COLOR = colors.HexColor("#374151")


def generate_story_pdf(
    parts: Sequence[StoryPart],
    output_path: Optional[Union[str, Path]] = None,
    title: str = DEFAULT_TITLE,
    margin: float = 15 * mm,
    max_image_width: float = 150 * mm,
) -> bytes:
    """
    Render a story into a multi-page A4 PDF.

    Each part's paragraph is followed by its illustration, when it has one.
    Paragraphs and illustrations are never split across two pages.

    Args:
        parts (list of StoryPart): The story, in reading order.
        output_path (str, optional): Where to also save the PDF.
        title (str, optional): Heading of the first page.
        margin (float, optional): Page margin, in points.
        max_image_width (float, optional): Widest an illustration may be drawn, in points.

    Returns:
        bytes: The PDF document.

    Raises:
        ExportError: if there is nothing to export or an illustration cannot be read.
    """
    if not parts:
        raise ExportError("There is no story to export yet.")

    title_style = ParagraphStyle("Title", fontName="Helvetica-Bold", fontSize=26, leading=32,
                                 alignment=TA_CENTER, textColor=TITLE_COLOR, spaceAfter=18)
    body_style = ParagraphStyle("Body", fontName="Helvetica", fontSize=14, leading=22,
                                alignment=TA_JUSTIFY, textColor=TEXT_COLOR, spaceAfter=12)

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=portrait(A4), leftMargin=margin, rightMargin=margin,
                            topMargin=margin, bottomMargin=margin, title=title)
    frame_width = doc.width
    frame_height = doc.height

    flow: List = [Paragraph(escape(title), title_style)]
    for number, part in enumerate(parts, 1):
        if part.paragraph:
            safe = escape(part.paragraph).replace("\n", "<br/>")
            flow.append(KeepTogether([Paragraph(safe, body_style)]))
        if part.has_image:
            image = _story_image(part, number, min(max_image_width, frame_width), frame_height * 0.8)
            flow.append(KeepTogether([Spacer(1, 4 * mm), image, Spacer(1, 8 * mm)]))

    try:
        doc.build(flow)
    except Exception as e:
        raise ExportError(f"The document could not be assembled: {e}") from e

    data = buffer.getvalue()
    if output_path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return data


def _story_image(part: StoryPart, number: int, max_w: float, max_h: float) -> Image:
    try:
        data = part.image_bytes()
        with PILImage.open(BytesIO(data)) as probe:
            iw, ih = probe.size
    except Exception as e:
        raise ExportError(f"An image failed to load for PDF generation (part {number}).") from e

    scale = min(max_w / iw, max_h / ih)
    image = Image(BytesIO(data), width=iw * scale, height=ih * scale)
    image.hAlign = "CENTER"
    return image
