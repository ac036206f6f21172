from .__meta__ import version as __version__
