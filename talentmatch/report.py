"""Plain-text rendering of match runs using Jinja2.

Templates live in the talentmatch.templates package directory and are
rendered with strict undefined checking so a missing field fails loudly.
"""

import logging

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from talentmatch.pipeline.models import MatchRunResult

logger = logging.getLogger(__name__)


class ReportRenderError(Exception):
    """Raised when a report template cannot be rendered."""

    pass


class ReportRenderer:
    """Renders a MatchRunResult as a text report.

    Templates are cached by the Jinja2 environment across calls.
    """

    def __init__(self, template_dir: str = "templates", text_template: str = "matches.txt.j2"):
        self.text_template_name = text_template
        self.env = Environment(
            loader=PackageLoader("talentmatch", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_text(self, run_result: MatchRunResult) -> str:
        """Render the ranked list, statistics and exclusions of one run.

        Raises:
            ReportRenderError: If template rendering fails
        """
        try:
            template = self.env.get_template(self.text_template_name)
            text = template.render(run_result.to_payload())
        except TemplateError as e:
            error_msg = f"Report rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise ReportRenderError(error_msg) from e

        logger.debug(f"Rendered text report for run {run_result.run_id}")
        return text
