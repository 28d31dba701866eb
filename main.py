import logging
import os

from dotenv import load_dotenv

from chiptune import AudioConfig, ChiptuneError, PlaybackSession
from chiptune.music import load_notes, render_playlist_to_wav


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="[%(asctime)s] %(levelname)s:%(name)s: %(message)s",
    )


def main() -> int:
    load_dotenv()
    configure_logging()
    log = logging.getLogger("chiptune")

    try:
        config = AudioConfig.from_env()
        notes = load_notes(os.getenv("NOTES_FILE", "mario_theme.txt"), config)

        export_path = os.getenv("EXPORT_PATH")
        if export_path and notes:
            buffer, duration = render_playlist_to_wav(notes, config)
            try:
                with open(export_path, "wb") as handle:
                    handle.write(buffer.getbuffer())
            except OSError as exc:
                log.error("Failed to write %s: %s", export_path, exc)
                return 1
            log.info("Wrote %.1f seconds to %s", duration, export_path)

        PlaybackSession(config).play(notes)
    except ChiptuneError as exc:
        log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        log.info("Stopping playback.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
