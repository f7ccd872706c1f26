"""GraphQL documents for GitHub Projects (v2)."""

_PROJECT_FIELDS = """
        id
        title
        number
        url
        closed
        fields(first: 20) {
          nodes {
            __typename
            ... on ProjectV2Field {
              id
              name
              dataType
            }
            ... on ProjectV2SingleSelectField {
              id
              name
              dataType
              options {
                id
                name
              }
            }
            ... on ProjectV2IterationField {
              id
              name
              dataType
            }
          }
        }
"""

GET_ORG_PROJECT = (
    """
query GetOrgProject($login: String!, $number: Int!) {
  organization(login: $login) {
    projectV2(number: $number) {"""
    + _PROJECT_FIELDS
    + """    }
  }
}
"""
)

GET_USER_PROJECT = (
    """
query GetUserProject($login: String!, $number: Int!) {
  user(login: $login) {
    projectV2(number: $number) {"""
    + _PROJECT_FIELDS
    + """    }
  }
}
"""
)

GET_PROJECT_ITEMS = """
query GetProjectItems($projectId: ID!, $first: Int = 100, $after: String) {
  node(id: $projectId) {
    ... on ProjectV2 {
      items(first: $first, after: $after) {
        pageInfo {
          hasNextPage
          endCursor
        }
        nodes {
          id
          fieldValues(first: 10) {
            nodes {
              ... on ProjectV2ItemFieldTextValue {
                text
                field {
                  ... on ProjectV2FieldCommon {
                    name
                  }
                }
              }
              ... on ProjectV2ItemFieldSingleSelectValue {
                name
                optionId
                field {
                  ... on ProjectV2FieldCommon {
                    name
                  }
                }
              }
              ... on ProjectV2ItemFieldDateValue {
                date
                field {
                  ... on ProjectV2FieldCommon {
                    name
                  }
                }
              }
            }
          }
          content {
            __typename
            ... on Issue {
              id
              number
              title
              url
              state
              labels(first: 10) {
                nodes {
                  name
                }
              }
              assignees(first: 5) {
                nodes {
                  login
                }
              }
              updatedAt
              closedAt
            }
            ... on PullRequest {
              id
              number
              title
              url
              state
              updatedAt
              closedAt
            }
          }
        }
      }
    }
  }
}
"""

ADD_PROJECT_ITEM = """
mutation AddProjectItem($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: { projectId: $projectId, contentId: $contentId }) {
    item {
      id
    }
  }
}
"""

UPDATE_PROJECT_ITEM_FIELD = """
mutation UpdateProjectItemField(
  $projectId: ID!
  $itemId: ID!
  $fieldId: ID!
  $singleSelectOptionId: String!
) {
  updateProjectV2ItemFieldValue(
    input: {
      projectId: $projectId
      itemId: $itemId
      fieldId: $fieldId
      value: { singleSelectOptionId: $singleSelectOptionId }
    }
  ) {
    projectV2Item {
      id
    }
  }
}
"""
