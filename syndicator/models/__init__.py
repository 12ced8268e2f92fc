from .source_post import MediaReference, PublishResult, SourcePost, TagResolution

__all__ = ["MediaReference", "PublishResult", "SourcePost", "TagResolution"]
