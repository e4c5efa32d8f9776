import io
import textwrap

from PIL import Image, ImageDraw, ImageFont


OG_WIDTH = 1200
OG_HEIGHT = 630

BACKGROUND = (26, 26, 26)
GOLD = (201, 169, 97)
LIGHT = (245, 245, 245)
MUTED = (170, 170, 170)

DEFAULT_TITLE = "Golden Gate Home Advisors"
DEFAULT_SUBTITLE = "San Francisco real estate, renovation and investment"


def _font(size: int):
    return ImageFont.load_default(size=size)


def render_og_image(title: str | None = None, subtitle: str | None = None) -> bytes:
    """Render a 1200x630 PNG social preview card."""
    title = (title or DEFAULT_TITLE).strip()[:120]
    subtitle = (subtitle or DEFAULT_SUBTITLE).strip()[:200]

    image = Image.new("RGB", (OG_WIDTH, OG_HEIGHT), BACKGROUND)
    draw = ImageDraw.Draw(image)

    draw.rectangle([(0, 0), (OG_WIDTH, 12)], fill=GOLD)
    draw.text((80, 70), "GOLDEN GATE HOME ADVISORS", font=_font(28), fill=GOLD)

    y = 170
    title_font = _font(64)
    for line in textwrap.wrap(title, width=30)[:3]:
        draw.text((80, y), line, font=title_font, fill=LIGHT)
        y += 78

    y += 20
    subtitle_font = _font(32)
    for line in textwrap.wrap(subtitle, width=60)[:2]:
        draw.text((80, y), line, font=subtitle_font, fill=MUTED)
        y += 44

    draw.text((80, OG_HEIGHT - 80), "goldengateadvisors.com", font=_font(26), fill=GOLD)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
