from textcrawl.config import CrawlConfig
from textcrawl.modes import CrawlMode, RepositoryTreeStrategy, SiteStrategy, select_mode, select_strategy
from textcrawl.parsing import UrlTools
from textcrawl.types import TreeEntry


class StubRepo:
    def __init__(self, entries):
        self.entries = entries

    def list_tree(self, owner, repo, ref, recursive=True):
        return self.entries


def test_select_mode():
    assert select_mode("https://github.com/o/r/tree/main/") is CrawlMode.REPOSITORY_TREE
    assert select_mode("https://github.com/o/r/tree/main/docs/") is CrawlMode.REPOSITORY_TREE
    assert select_mode("https://github.com/o/r/") is CrawlMode.GENERIC_SITE
    assert select_mode("https://example.com/o/r/tree/main/") is CrawlMode.GENERIC_SITE
    assert select_mode("http://github.com/o/r/tree/main/") is CrawlMode.GENERIC_SITE


def test_select_strategy_returns_matching_strategy():
    cfg = CrawlConfig()
    site = select_strategy("https://example.com/docs/", "https://example.com/docs/", cfg)
    assert isinstance(site, SiteStrategy)
    assert site.seed_paths() == ["/docs/"]

    start = "https://github.com/o/r/tree/v2/docs/guide.md"
    tree = select_strategy(start, UrlTools.normalize_start(start), cfg, repo_client=StubRepo([]))
    assert isinstance(tree, RepositoryTreeStrategy)
    assert (tree.owner, tree.repo, tree.ref, tree.root_path) == ("o", "r", "v2", "docs/guide.md")


def test_repository_tree_seed_paths():
    repo = StubRepo([
        TreeEntry("docs/a.md", "blob"),
        TreeEntry("docs/B.Md", "blob"),
        TreeEntry("docs/notes.txt", "blob"),
        TreeEntry("docs/Contributing.md", "blob"),
        TreeEntry("src/readme.md", "blob"),
    ])
    strategy = RepositoryTreeStrategy(
        "https://github.com/o/r/tree/main/docs", repo, exclude=("contributing",), log_enabled=False
    )
    assert strategy.seed_paths() == [
        "https://raw.githubusercontent.com/o/r/main/docs/a.md",
        "https://raw.githubusercontent.com/o/r/main/docs/B.Md",
    ]
    assert strategy.extract("https://raw.githubusercontent.com/o/r/main/docs/a.md", "<b>raw</b>") == ("<b>raw</b>", ())
