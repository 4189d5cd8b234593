"""Local note-taking server over a folder of markdown and text files."""
