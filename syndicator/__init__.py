"""
Top-level package for the WordPress article syndication utility.

This package bundles everything required to copy an article published on
another site into a WordPress installation as a draft: fetch the rendered
page, extract the canonical post fields, upload the featured image to the
Media Library, resolve tags and create the draft.  Modules are split into
subpackages:

* :mod:`syndicator.extractors` – page download and HTML → post extraction
* :mod:`syndicator.parsers` – HTML clean-up (mis-encoding repair, link rewriting)
* :mod:`syndicator.publishers` – WordPress REST API interactions
* :mod:`syndicator.models` – typed records passed between stages
* :mod:`syndicator.utils` – errors, run reports, slug and tag helpers

Each layer has no knowledge of the command line; orchestration is handled
in :mod:`syndicator.syndication_tool`.
"""
