"""CLI demo that exercises the batched :class:`twitch_data.TwitchData` lookups.

Run with the virtual environment activated::

    python examples/demo_twitch_data.py ninja shroud pokimane

Set ``TWITCH_CLIENT_ID`` (and optionally ``TWITCH_GQL_URL``) before running.
"""

import asyncio
import logging
import os
import sys
from pprint import pprint

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from twitch_data import TwitchData

logging.basicConfig(level=logging.INFO)


async def main(logins: list[str]) -> None:
    async with TwitchData() as client:
        # All of these go out as a single batched request.
        users = await asyncio.gather(*(client.users.get_basic(login=login) for login in logins))
        streams = await asyncio.gather(*(client.streams.get_meta(login=login) for login in logins))

        for login, user, stream in zip(logins, users, streams):
            if user is None:
                print(f"{login}: not found")
                continue
            state = f"live with {stream.get('viewersCount')} viewers" if stream else "offline"
            print(f"{user.get('displayName')} [id:{user.get('id')}] - {state}")

        top = await client.tags.top(10)
        print("\nTop tags:")
        pprint([tag.get("label") for tag in top])


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["ninja"]))
