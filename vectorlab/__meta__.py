# `name` is the name of the package as used for `pip install package`
name = "vectorlab"
# `path` is the name of the package for `import package`
path = name.lower().replace("-", "_").replace(" ", "_")
# Your version number should follow https://python.org/dev/peps/pep-0440 and
# https://semver.org
version = "0.1.0"
author = "vectorlab contributors"
author_email = ""
description = "Loading, cleaning, cropping and joining of vector geodata"  # One-liner
url = ""  # your project home-page
license = "GNU General Public License version 3"  # See https://choosealicense.com
