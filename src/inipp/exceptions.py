class InippError(Exception):
    pass


class EncodingError(InippError, ValueError):
    pass


class StructureError(InippError, ValueError):
    pass
