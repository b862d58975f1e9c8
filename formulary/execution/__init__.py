"""Resolution and command execution.

- **resolver**: path resolution (interactive walk, command string, flags)
- **input**: input channel selection (stdin / flags / prompt) -> resolved target
- **commands**: apply a resolved target to the primary workspace and its mirror
"""
