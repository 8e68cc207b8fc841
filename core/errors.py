"""
Converter exceptions.

The transformation itself never raises for unusual node shapes; these
errors exist only at the call boundary (bad input, parser or packer
failures).
"""


class ConverterError(Exception):
    """Base error for the markdown to docx pipeline"""
    pass


class InvalidInputError(ConverterError):
    """Markdown payload is missing, empty or not a string"""
    pass


class ConversionError(ConverterError):
    """Parsing or packing failed; the original exception is chained"""
    pass
