""" Snapshots of enlarged blocks, keyed by (number of sites, phase tag).

The growth phase writes with tag GROWTH, sweep k writes with tag k.
"""

import abc
import logging
import os

import numpy as np

from blockdmrg.block import Block
from blockdmrg.exceptions import DMRGError

logger = logging.getLogger(__name__)

GROWTH = -1


def phase_name(tag):
    return 'growth' if tag == GROWTH else f'sweep {tag}'


class BlockStore(abc.ABC):
    """ Key-value store of block snapshots. Subclasses implement _put, _get and _has. """

    def write(self, block: Block, sites, tag):
        if block.sites != sites:
            raise DMRGError(f'Cannot store a block of {block.sites} sites under {sites} sites')
        self._put(sites, tag, block)
        logger.debug('Stored %r for %s', block, phase_name(tag))

    def read(self, sites, tag) -> Block:
        if (sites, tag) not in self:
            raise DMRGError(f'No block of {sites} sites stored for {phase_name(tag)}')
        return self._get(sites, tag)

    def latest(self, sites, before) -> Block:
        """ The most recent snapshot of `sites` sites written before phase `before`. """
        for tag in range(before - 1, GROWTH - 1, -1):
            if (sites, tag) in self:
                return self._get(sites, tag)
        raise DMRGError(f'No block of {sites} sites stored before {phase_name(before)}')

    def __contains__(self, key):
        sites, tag = key
        return self._has(sites, tag)

    @abc.abstractmethod
    def _put(self, sites, tag, block):
        """ Store a snapshot. """

    @abc.abstractmethod
    def _get(self, sites, tag):
        """ Load a snapshot known to exist. """

    @abc.abstractmethod
    def _has(self, sites, tag):
        """ Whether a snapshot exists. """


class MemoryBlockStore(BlockStore):
    def __init__(self):
        self.history = {}

    def _put(self, sites, tag, block):
        self.history[(sites, tag)] = block

    def _get(self, sites, tag):
        return self.history[(sites, tag)]

    def _has(self, sites, tag):
        return (sites, tag) in self.history

    def __len__(self):
        return len(self.history)


class NpzBlockStore(BlockStore):
    """ One .npz file per snapshot in `directory`. """

    def __init__(self, directory):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def path(self, sites, tag):
        name = 'growth' if tag == GROWTH else f'sweep{tag}'
        return os.path.join(self.directory, f'block_{name}_{sites}.npz')

    def _put(self, sites, tag, block):
        np.savez(self.path(sites, tag), sites=block.sites, **block.operators())

    def _get(self, sites, tag):
        with np.load(self.path(sites, tag)) as data:
            return Block(blockH=data['H'], blockSz=data['Sz'], blockSp=data['Sp'],
                         blockSm=data['Sm'], sites=int(data['sites']))

    def _has(self, sites, tag):
        return os.path.exists(self.path(sites, tag))
