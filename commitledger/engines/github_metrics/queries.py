"""GraphQL documents for commit collection.

Both queries page through 100 commits at a time, the maximum GitHub allows,
and take an opaque ``$cursor`` that is None on the first call.
"""

PAGE_SIZE = 100

PULL_REQUEST_COMMITS_QUERY = """
query ($owner: String!, $repo: String!, $number: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      number
      additions
      deletions
      changedFiles
      merged
      mergeable
      headRefOid
      commits(first: 100, after: $cursor) {
        totalCount
        pageInfo {
          hasNextPage
          endCursor
        }
        edges {
          node {
            commit {
              committedDate
              author {
                name
                email
                date
              }
            }
          }
        }
      }
    }
  }
}
"""

REPOSITORY_HISTORY_QUERY = """
query ($owner: String!, $repo: String!, $since: GitTimestamp!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    defaultBranchRef {
      target {
        ... on Commit {
          history(first: 100, after: $cursor, since: $since) {
            pageInfo {
              hasNextPage
              endCursor
            }
            edges {
              node {
                oid
                author {
                  name
                  email
                  date
                }
              }
            }
          }
        }
      }
    }
  }
}
"""
