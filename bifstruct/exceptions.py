class BIFException(Exception):
    '''Base class to extend in order to throw exception in bifstruct.

    Other than the message it takes the chain of the layers that
    caused the exception, innermost first.
    '''

    def __init__(self, message='', chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(message)

    def __str__(self):
        message = super().__str__()
        if not self.chain:
            return message

        return '%s (at %s)' % (message, '.'.join(reversed(self.chain)))


class InvalidFormatException(BIFException):
    '''The magic doesn't correspond.'''
    pass


class UnsupportedVersionException(BIFException):
    pass


class CorruptIndexException(BIFException):
    '''The offset table disagrees with the header or with itself.'''
    pass


class IOException(BIFException):
    '''Wraps open/read/write/seek failures and short reads.'''
    pass
