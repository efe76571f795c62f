class FormCraftError(Exception):
    """Base class for errors raised by formcraft."""


class NoTemplateSelected(FormCraftError):
    """A fill session operation was called before a template was selected."""


class ExportError(FormCraftError):
    """A submission could not be handed to its destination."""
