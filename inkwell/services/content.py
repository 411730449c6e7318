import logging

from inkwell.models.content_form import PageForm, PostForm, PreparedPage, PreparedPost
from inkwell.models.document import DocumentNode
from inkwell.services.renderer import render_to_markup
from inkwell.services.sanitizer import sanitize

logger = logging.getLogger(__name__)


def convert_json_to_html(doc: DocumentNode) -> str:
    """Render *doc* and filter the result down to publishable HTML."""
    return sanitize(render_to_markup(doc))


def prepare_post(form: PostForm) -> PreparedPost:
    """Return the post record to persist: the editable document plus its HTML."""
    html_content = convert_json_to_html(form.json_content)
    logger.info("Prepared post %s (%d chars of HTML)", form.slug, len(html_content))
    return PreparedPost(**form.model_dump(), html_content=html_content)


def prepare_page(form: PageForm) -> PreparedPage:
    """Return the page record to persist: the editable document plus its HTML."""
    html_content = convert_json_to_html(form.json_content)
    logger.info("Prepared page %s (%d chars of HTML)", form.slug, len(html_content))
    return PreparedPage(**form.model_dump(), html_content=html_content)
