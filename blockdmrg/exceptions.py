""" Exception raised for fatal logic errors in a DMRG run. """


class DMRGError(Exception):
    """ A DMRG run cannot continue.

    Raised for desynchronized basis bookkeeping (operator dimensions that
    disagree), missing block snapshots, solver failure and invalid run
    parameters. Never recovered locally.
    """
