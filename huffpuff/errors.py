class HuffmanError(Exception): # base for everything the huff/puff tools report
    pass


class UsageError(HuffmanError):
    pass


class FileOpenError(HuffmanError): # input unreadable or output uncreatable
    def __init__(self, path, mode: str): # mode: "input" or "output"
        self.path = path
        self.mode = mode
        super().__init__(f"Can't open {path} for {mode}.")


class TruncatedHeaderError(HuffmanError):
    pass


class TruncatedStreamError(HuffmanError):
    pass
