import asyncio
import logging
from typing import BinaryIO, Optional

import aiohttp

from bencoding.decoder import DEFAULT_MAX_DEPTH, Decoder
from bencoding.encoder import Encoder
from bencoding.projection import visitor_for


def load(fp: BinaryIO, target=None, max_depth: int = DEFAULT_MAX_DEPTH, strict: bool = False):
    """
        Read a whole binary file object and decode it as one value
    """
    data = fp.read()
    logging.debug(f"Decoding {len(data)} bytes from {getattr(fp, 'name', fp)}")
    return Decoder(data, max_depth=max_depth, strict=strict).decode(visitor_for(target))


def dump(value, fp: BinaryIO) -> int:
    """
        Encode `value` and write it to a binary file object

        :return The number of bytes written
    """
    data = Encoder(value).encode()
    fp.write(data)
    return len(data)


def load_path(path, target=None, **options):
    with open(path, "rb") as f:
        return load(f, target, **options)


def dump_path(value, path) -> int:
    # encode first so a failure leaves an existing file untouched
    data = Encoder(value).encode()
    with open(path, "wb") as f:
        f.write(data)
    return len(data)


async def fetch_bytes(url: str, session: Optional[aiohttp.ClientSession] = None,
                      timeout: float = 60) -> bytes:
    """
        Download the raw body of `url`

        :param session: an open aiohttp session to reuse, a new one is
                        created for this request when None
        :param timeout: seconds to wait for the whole response
    """
    if session is None:
        async with aiohttp.ClientSession() as client:
            return await fetch_bytes(url, client, timeout)

    logging.debug(f"Fetching bencoded data from {url}")
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as response:
            if not response.status == 200:
                raise ConnectionError(f"Unable to fetch {url}, status {response.status}")
            data = await response.read()
    except asyncio.TimeoutError:
        logging.warning(f"Request to {url} timed out after {timeout} seconds")
        raise ConnectionError(f"Connection to {url} timed-out")
    logging.debug(f"Got {len(data)} bytes from {url}")
    return data


async def fetch(url: str, target=None, session: Optional[aiohttp.ClientSession] = None,
                timeout: float = 60, max_depth: int = DEFAULT_MAX_DEPTH, strict: bool = False):
    """
        Download a bencoded document, such as a tracker response or a
        .torrent file, and decode it
    """
    data = await fetch_bytes(url, session, timeout)
    return Decoder(data, max_depth=max_depth, strict=strict).decode(visitor_for(target))
