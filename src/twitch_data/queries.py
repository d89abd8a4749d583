"""GraphQL documents used by the resources."""

from __future__ import annotations

# --- Badges --- #
GLOBAL_BADGES = """
query GlobalBadges {
  badges {
    id
    setID
    version
    title
    image1x: imageURL(size: NORMAL)
    image2x: imageURL(size: DOUBLE)
    image4x: imageURL(size: QUADRUPLE)
  }
}
"""

# --- Categories --- #
SEARCH_CATEGORY = """
query SearchCategory($query: String!, $first: Int, $cursor: Cursor) {
  searchCategories(query: $query, first: $first, after: $cursor) {
    totalCount
    pageInfo { hasNextPage }
    edges {
      cursor
      node { id name displayName boxArtURL(width: 40, height: 56) }
    }
  }
}
"""

CATEGORY_FETCH = """
query CategoryFetch($id: ID, $name: String) {
  game(id: $id, name: $name) {
    id
    name
    displayName
    description
    boxArtURL(width: 40, height: 56)
  }
}
"""

# --- Users --- #
SEARCH_USER = """
query SearchUser($query: String!, $first: Int, $cursor: Cursor) {
  searchUsers(userQuery: $query, first: $first, after: $cursor) {
    totalCount
    pageInfo { hasNextPage }
    edges {
      cursor
      node { id login displayName profileImageURL(width: 50) }
    }
  }
}
"""

USER_FETCH = """
query UserFetch($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    login
    displayName
    description
    profileImageURL(width: 300)
    roles { isAffiliate isPartner }
  }
}
"""

USER_BULK = """
query UserBulk($ids: [ID!], $logins: [String!]) {
  users(ids: $ids, logins: $logins) {
    id
    login
    displayName
    profileImageURL(width: 50)
  }
}
"""

USER_GAME = """
query UserGame($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    broadcastSettings { id game { id name displayName } }
  }
}
"""

USER_SELF = """
query UserSelf($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    self { isEditor isModerator isVIP subscriptionBenefit { id tier } }
  }
}
"""

USER_FOLLOWED = """
query UserFollowed($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    self { follower { followedAt disableNotifications } }
  }
}
"""

USER_COLOR = """
query UserColor($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    primaryColorHex
  }
}
"""

LAST_BROADCAST = """
query LastBroadcast($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    lastBroadcast { id title startedAt game { id name displayName } }
  }
}
"""

BROADCAST_ID = """
query BroadcastID($id: ID, $login: String) {
  user(id: $id, login: $login) {
    id
    stream { id archiveVideo { id } }
  }
}
"""

FOLLOW_USER = """
mutation FollowUser($input: FollowUserInput!) {
  followUser(input: $input) {
    follow { disableNotifications followedAt }
    error { code }
  }
}
"""

UNFOLLOW_USER = """
mutation UnfollowUser($input: UnfollowUserInput!) {
  unfollowUser(input: $input) {
    follow { disableNotifications followedAt }
    error { code }
  }
}
"""

# --- Streams --- #
STREAM_FETCH = """
query StreamFetch($ids: [ID!], $logins: [String!]) {
  users(ids: $ids, logins: $logins) {
    id
    login
    stream { id createdAt type viewersCount game { id name } }
  }
}
"""

# --- Polls --- #
POLL_GET = """
query PollGet($id: ID!) {
  poll(id: $id) {
    id
    title
    status
    durationSeconds
    startedAt
    choices { id title votes { total } }
  }
}
"""

POLL_CREATE = """
mutation PollCreate($input: CreatePollInput!) {
  createPoll(input: $input) {
    poll { id title status durationSeconds }
    error { code }
  }
}
"""

POLL_ARCHIVE = """
mutation PollArchive($id: ID!) {
  archivePoll(input: {pollID: $id}) {
    poll { id status }
    error { code }
  }
}
"""

POLL_TERMINATE = """
mutation PollTerminate($id: ID!) {
  terminatePoll(input: {pollID: $id}) {
    poll { id status }
    error { code }
  }
}
"""

# --- Tags --- #
TAG_FIELDS = """
  id
  isAutomated
  isLanguageTag
  tagName
  localizedName
  localizedDescription
  scope
"""

TAGS_FETCH = """
query TagsFetch($ids: [ID!]) {
  contentTags(ids: $ids) {%s}
}
""" % TAG_FIELDS

TAGS_TOP = """
query TagsTop($limit: Int) {
  topTags(limit: $limit) {%s}
}
""" % TAG_FIELDS

SEARCH_TAGS = """
query SearchTags($query: String!, $categoryID: ID, $limit: Int) {
  searchLiveTags(userQuery: $query, categoryID: $categoryID, limit: $limit) {%s}
}
""" % TAG_FIELDS
