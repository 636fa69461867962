import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(os.environ.get("PLYEXPORT_OUTPUT_DIR", str(BASE_DIR / "output")))

PLY_MEDIA_TYPE = "text/plain"
