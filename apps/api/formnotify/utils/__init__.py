from formnotify.utils.normalization import is_valid_email, single_line

__all__ = ["is_valid_email", "single_line"]
