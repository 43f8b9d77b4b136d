import sys
from pathlib import Path

from rtcm3_stream.messages.dispatch import UnsupportedType, decode_frame
from rtcm3_stream.protocol.bitfield import DecodeError
from rtcm3_stream.stream.extractor import Config, FrameExtractor


def read_chunks(path: str, size: int = 512):
    with Path(path).open("rb") as f:
        while True:
            chunk = f.read(size)
            if not chunk:
                return
            yield chunk


if __name__ == "__main__":
    src = sys.argv[1] if len(sys.argv) > 1 else "tests/output/reference/capture.rtcm3"

    ex = FrameExtractor(Config(max_size=4096))
    for chunk in read_chunks(src):
        for frame in ex.push(chunk):
            try:
                msg = decode_frame(frame)
            except DecodeError as e:
                print(f"decode failed: {e}")
                continue
            if isinstance(msg, UnsupportedType):
                print(f"type {msg.message_number}: not decoded ({len(frame)} bytes)")
            else:
                print(type(msg).__name__, msg)

    print(f"stats: {ex.stats}")
