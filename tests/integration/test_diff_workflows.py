# Integration tests for the diff and config commands

import pytest
import os

from conftest import diff_args, make_commit, write_files, MockArgs
from pitdiff import pit
from pitdiff.commands import config, diff
from pitdiff.utils import config as config_utils

FOLDER_DIFF = (
    "diff --git a/folder/folder.txt b/folder/folder.txt\n"
    "index 0119635..95c4c65 100644\n"
    "--- a/folder/folder.txt\n"
    "+++ b/folder/folder.txt\n"
    "@@ -1 +1 @@\n"
    "-folder\n"
    "\\ No newline at end of file\n"
    "+folder change\n"
    "\\ No newline at end of file\n"
)


def run_diff(capsysbinary, **overrides):
    # Runs `pit-diff diff` and returns what it printed to stdout
    diff.run(diff_args(**overrides))
    return capsysbinary.readouterr().out.decode()


class TestWorkingTreeDiff:
    # Tests for diffing HEAD (or a revision) against the working directory

    def test_modified_file(self, temp_repo, capsysbinary):
        make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        write_files(temp_repo, {'folder/folder.txt': 'folder change'})
        assert run_diff(capsysbinary) == FOLDER_DIFF

    def test_clean_working_tree(self, repo_with_commit, capsysbinary):
        assert run_diff(capsysbinary) == ""

    def test_new_and_deleted_files(self, repo_with_commit, capsysbinary):
        repo_root, _ = repo_with_commit
        os.remove(os.path.join(repo_root, 'README.md'))
        write_files(repo_root, {'folder/folder.txt': 'change'})
        assert run_diff(capsysbinary) == (
            "diff --git a/README.md b/README.md\n"
            "deleted file mode 100644\n"
            "index 181e1c3..0000000\n"
            "--- a/README.md\n"
            "+++ /dev/null\n"
            "@@ -1 +0,0 @@\n"
            "-# Test Project\n"
            "diff --git a/folder/folder.txt b/folder/folder.txt\n"
            "new file mode 100644\n"
            "index 0000000..8013df8\n"
            "--- /dev/null\n"
            "+++ b/folder/folder.txt\n"
            "@@ -0,0 +1 @@\n"
            "+change\n"
            "\\ No newline at end of file\n"
        )

    def test_repository_without_commits(self, temp_repo, capsysbinary):
        write_files(temp_repo, {'a.txt': 'a\n'})
        assert run_diff(capsysbinary).startswith("diff --git a/a.txt b/a.txt\nnew file mode 100644\n")

    def test_ignored_files_are_skipped(self, repo_with_commit, capsysbinary):
        repo_root, _ = repo_with_commit
        write_files(repo_root, {'.pitignore': '*.log\n', 'debug.log': 'noise\n'})
        out = run_diff(capsysbinary)
        assert "debug.log" not in out
        assert "b/.pitignore" in out

    def test_executable_bit(self, repo_with_commit, capsysbinary):
        repo_root, _ = repo_with_commit
        os.chmod(os.path.join(repo_root, 'README.md'), 0o755)
        assert run_diff(capsysbinary) == (
            "diff --git a/README.md b/README.md\n"
            "old mode 100644\n"
            "new mode 100755\n"
        )

    def test_binary_file(self, temp_repo, capsysbinary):
        make_commit(temp_repo, {'image.bin': b'\x89PNG\0\x01'})
        write_files(temp_repo, {'image.bin': b'\x89PNG\0\x02'})
        assert run_diff(capsysbinary).endswith("--- a/image.bin\n+++ b/image.bin\nBinary files differ\n")


class TestRevisionDiff:
    # Tests for diffing two committed revisions

    def test_two_commits(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        second = make_commit(temp_repo, {'folder/folder.txt': 'folder change'})
        assert run_diff(capsysbinary, revisions=[first, second]) == FOLDER_DIFF

    def test_abbreviated_revisions(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        second = make_commit(temp_repo, {'folder/folder.txt': 'folder change'})
        assert run_diff(capsysbinary, revisions=[first[:7], second[:8]]) == FOLDER_DIFF

    def test_branch_against_head(self, temp_repo, capsysbinary):
        make_commit(temp_repo, {'folder/folder.txt': 'folder change'})
        make_commit(temp_repo, {'folder/folder.txt': 'folder'}, branch='old')
        assert run_diff(capsysbinary, revisions=['old', 'HEAD']) == FOLDER_DIFF

    def test_one_revision_against_working_tree(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        make_commit(temp_repo, {'folder/folder.txt': 'something else'})
        write_files(temp_repo, {'folder/folder.txt': 'folder change'})
        assert run_diff(capsysbinary, revisions=[first]) == FOLDER_DIFF


class TestDiffOptions:
    # Tests for the command line flags of `pit-diff diff`

    def two_files(self, repo_root):
        first = make_commit(repo_root, {'doc/b.txt': 'old doc\n', 'src/a.txt': 'old code\n'})
        second = make_commit(repo_root, {'doc/b.txt': 'new doc\n', 'src/a.txt': 'new code\n'})
        return [first, second]

    def test_path_filter(self, temp_repo, capsysbinary):
        out = run_diff(capsysbinary, revisions=self.two_files(temp_repo), paths=['src'])
        assert "src/a.txt" in out
        assert "doc/b.txt" not in out

    def test_delta_filter(self, temp_repo, capsysbinary):
        out = run_diff(capsysbinary, revisions=self.two_files(temp_repo), delta_filter='new code')
        assert out.count("diff --git") == 1
        assert "+new code\n" in out

    def test_no_prefix(self, temp_repo, capsysbinary):
        out = run_diff(capsysbinary, revisions=self.two_files(temp_repo), no_prefix=True)
        assert "diff --git src/a.txt src/a.txt\n" in out
        assert "--- src/a.txt\n+++ src/a.txt\n" in out

    def test_custom_prefixes(self, temp_repo, capsysbinary):
        out = run_diff(capsysbinary, revisions=self.two_files(temp_repo), src_prefix='old/', dst_prefix='new/')
        assert "diff --git old/src/a.txt new/src/a.txt\n" in out

    def test_abbrev(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        second = make_commit(temp_repo, {'folder/folder.txt': 'folder change'})
        out = run_diff(capsysbinary, revisions=[first, second], abbrev=12)
        assert "index 01196353b62d..95c4c6520683 100644\n" in out

    def test_unified_context(self, temp_repo, capsysbinary):
        lines = "".join(f"{n}\n" for n in range(1, 11))
        first = make_commit(temp_repo, {'f.txt': lines})
        second = make_commit(temp_repo, {'f.txt': lines.replace("5\n", "five\n")})
        out = run_diff(capsysbinary, revisions=[first, second], unified=1)
        assert "@@ -4,3 +4,3 @@\n 4\n-5\n+five\n 6\n" in out

    def test_find_renames(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'old.txt': 'same\n'})
        second = make_commit(temp_repo, {'new.txt': 'same\n'})
        out = run_diff(capsysbinary, revisions=[first, second], find_renames=diff.USE_CONFIGURED_SCORE)
        assert out == (
            "diff --git a/old.txt b/new.txt\n"
            "similarity index 100%\n"
            "rename from old.txt\n"
            "rename to new.txt\n"
        )

    def test_find_copies(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'a.txt': 'shared\n'})
        second = make_commit(temp_repo, {'a.txt': 'changed\n', 'b.txt': 'shared\n'})
        out = run_diff(capsysbinary, revisions=[first, second], find_copies=True)
        assert "copy from a.txt\ncopy to b.txt\n" in out


class TestConfiguredDiff:
    # Tests for [diff] settings read from .pit/config

    def test_configured_context_and_override(self, temp_repo, capsysbinary):
        lines = "".join(f"{n}\n" for n in range(1, 11))
        first = make_commit(temp_repo, {'f.txt': lines})
        second = make_commit(temp_repo, {'f.txt': lines.replace("5\n", "five\n")})

        config.run(MockArgs(key='diff.context', value='0'))
        capsysbinary.readouterr()
        assert "@@ -5 +5 @@\n" in run_diff(capsysbinary, revisions=[first, second])
        assert "@@ -2,7 +2,7 @@\n" in run_diff(capsysbinary, revisions=[first, second], unified=3)

    def test_configured_renames(self, temp_repo, capsysbinary):
        config_utils.write_config('diff.renames', 'true', temp_repo)
        first = make_commit(temp_repo, {'old.txt': 'same\n'})
        second = make_commit(temp_repo, {'new.txt': 'same\n'})
        assert "rename from old.txt\n" in run_diff(capsysbinary, revisions=[first, second])

    def test_config_command_reports(self, temp_repo, capsysbinary):
        config.run(MockArgs(key='diff.abbrev', value='9'))
        assert capsysbinary.readouterr().out == b"Set diff.abbrev to '9'\n"

    def test_config_command_rejects_bad_value(self, temp_repo, capsysbinary):
        with pytest.raises(SystemExit) as excinfo:
            config.run(MockArgs(key='diff.context', value='lots'))
        assert excinfo.value.code == 1
        err = capsysbinary.readouterr().err
        assert b"Error: Invalid value for diff.context: 'lots'" in err
        assert b"Valid diff settings: abbrev, binaryscan, context, renamelimit, renames, renamescore\n" in err

    def test_config_command_other_sections_not_listed(self, temp_repo, capsysbinary):
        with pytest.raises(SystemExit):
            config.run(MockArgs(key='nodot', value='x'))
        assert b"Valid diff settings" not in capsysbinary.readouterr().err


class TestFailures:
    # Tests for fatal errors reported by `pit-diff diff`

    def test_not_a_repository(self, temp_dir, capsysbinary):
        os.chdir(temp_dir)
        with pytest.raises(SystemExit) as excinfo:
            diff.run(diff_args())
        assert excinfo.value.code == 1
        assert capsysbinary.readouterr().err == b"fatal: not a pit repository\n"

    def test_unknown_revision(self, repo_with_commit, capsysbinary):
        with pytest.raises(SystemExit):
            diff.run(diff_args(revisions=['deadbeef']))
        assert b"fatal: Object not found: deadbeef" in capsysbinary.readouterr().err

    def test_too_many_revisions(self, repo_with_commit, capsysbinary):
        with pytest.raises(SystemExit):
            diff.run(diff_args(revisions=['HEAD', 'HEAD', 'HEAD']))
        assert b"at most two revisions" in capsysbinary.readouterr().err

    def test_bad_delta_filter(self, repo_with_commit, capsysbinary):
        repo_root, _ = repo_with_commit
        write_files(repo_root, {'README.md': 'changed\n'})
        with pytest.raises(SystemExit):
            diff.run(diff_args(delta_filter='('))
        assert b"fatal:" in capsysbinary.readouterr().err


class TestEntryPoint:
    # Tests for argument parsing in pit.main()

    def test_diff_through_main(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'folder/folder.txt': 'folder'})
        second = make_commit(temp_repo, {'folder/folder.txt': 'folder change'})
        pit.main(['diff', first, second])
        assert capsysbinary.readouterr().out.decode() == FOLDER_DIFF

    def test_flags_through_main(self, temp_repo, capsysbinary):
        first = make_commit(temp_repo, {'src/old.txt': 'same\n', 'doc.txt': 'x\n'})
        second = make_commit(temp_repo, {'src/new.txt': 'same\n', 'doc.txt': 'y\n'})
        pit.main(['diff', '--path', 'src', '--no-prefix', first, second, '-M'])
        assert capsysbinary.readouterr().out.decode() == (
            "diff --git src/old.txt src/new.txt\n"
            "similarity index 100%\n"
            "rename from src/old.txt\n"
            "rename to src/new.txt\n"
        )

    def test_config_through_main(self, temp_repo, capsysbinary):
        pit.main(['config', 'diff.context', '2'])
        assert config_utils.get_diff_config(temp_repo)['context'] == 2
